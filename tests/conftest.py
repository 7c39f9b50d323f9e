# -*- coding: utf-8 -*-
import pytest

DESCENT_KML='''<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
<Document>
  <name>The last four minutes</name>
  <Folder>
    <name>Approach</name>
    <Placemark>
      <name>Not a descent marker</name>
      <Point><coordinates>10,10,0</coordinates></Point>
    </Placemark>
  </Folder>
  <Folder>
    <name>Decent Markers</name>
    <open>0</open>
    <Placemark>
      <name>3:42 Pitchover</name>
      <Point>
        <altitudeMode>relativeToGround</altitudeMode>
        <coordinates>23.4,0.69,1500</coordinates>
      </Point>
    </Placemark>
    <Placemark>
      <name>Unpositioned marker</name>
    </Placemark>
    <Placemark>
      <name>1:30 Program alarm</name>
      <Point><coordinates>23.45,0.695,300</coordinates></Point>
    </Placemark>
    <Placemark>
      <Point><coordinates>1,1,1</coordinates></Point>
    </Placemark>
    <Placemark>
      <name>0:00 Contact light</name>
      <Point><coordinates>23.5,0.70,-1920</coordinates></Point>
    </Placemark>
  </Folder>
</Document>
</kml>
'''

@pytest.fixture
def descent_kml(tmp_path):
    path=tmp_path/'descent.kml'
    path.write_text(DESCENT_KML,encoding='utf-8')
    return path
