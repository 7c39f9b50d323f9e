# -*- coding: utf-8 -*-
"""
Generic labeled tree for KML documents and depth-first search helpers
"""

import xml.etree.ElementTree as ET
from collections import namedtuple

LabeledNode = namedtuple('LabeledNode', ['name', 'text', 'children'])

#%% Functions
def local_name(tag):
    '''
    Tag without namespace, e.g. {http://www.opengis.net/kml/2.2}Folder -> Folder
    '''
    return tag.rsplit('}', 1)[-1]

def to_node(element):
    text = element.text.strip() if element.text is not None else ''
    return LabeledNode(name=local_name(element.tag),
                       text=text if text else None,
                       children=tuple(to_node(e) for e in element))

def parse(text):
    '''
    Parse markup text into a LabeledNode tree. Malformed input raises ET.ParseError.
    '''
    return to_node(ET.fromstring(text))

def read(path):
    with open(path, 'r', encoding='utf-8') as f:
        return parse(f.read())

def traverse(node):
    '''
    Pre-order walk over node and all its descendants
    '''
    stack=[node]
    while stack:
        n=stack.pop()
        yield n
        stack.extend(reversed(n.children))

def filter(node, predicate):
    return (n for n in traverse(node) if predicate(n))

def find(node, predicate):
    return next(filter(node, predicate), None)

def child(node, name):
    return next((c for c in node.children if c.name == name), None)

def get_string(node):
    if node is None or not node.text:
        return None
    return node.text

def has_name(name):
    '''
    Predicate matching nodes whose <name> child reads exactly `name`
    '''
    def predicate(node):
        return get_string(child(node, 'name')) == name
    return predicate
