# -*- coding: utf-8 -*-
"""
Convert Apollo 11 LEM descent markers (KML) to OpenSpace GlobeTranslation keyframes
"""

import os
cd=os.getcwd()
import re
import sys
import warnings
import numpy as np
import pandas as pd
import matplotlib
from matplotlib import pyplot as plt
import kml_tree

matplotlib.rcParams['font.family'] = 'serif'
matplotlib.rcParams['mathtext.fontset'] = 'cm'
matplotlib.rcParams['font.size'] = 14

#%% Inputs
source=os.path.join(cd,'data/the_last_four_minutes_2019-06-09.kml')#KML from http://apollo.mem-tek.com/GoogleMoonKMZ.html
storage=os.path.join(cd,'data/apollo11LemDescent.asset')
figures=os.path.join(cd,'figures')

group_name='Decent Markers'#spelled as in the KML
touchdown=pd.Timestamp('1969-07-20 20:17:40',tz='UTC')
landing_spot=(23.4733, 0.6741, -1925)#[deg,deg,m] landing spot from LRO footage

columns=['Longitude','Latitude','Altitude']
time_prefix=re.compile(r'\s*(\d+):(\d+)')
plot=False

#%% Functions
def elapsed_seconds(name):
    '''
    Seconds before touchdown encoded as M:SS at the start of a marker name, NaN if absent
    '''
    match=time_prefix.match(name or '')
    if match is None:
        return np.nan
    return int(match.group(1))*60+int(match.group(2))

def marker_time(name, touchdown=touchdown):
    seconds=elapsed_seconds(name)
    if np.isnan(seconds):
        raise ValueError(f'Marker name {name!r} does not start with a M:SS time')
    time=touchdown-pd.to_timedelta(seconds,unit='s')
    return time.floor('s').strftime('%Y-%m-%dT%H:%M:%S')

def parse_coordinates(text):
    lon_lat_alt=[c.strip() for c in text.split(',')][:3]
    return lon_lat_alt+[None]*(3-len(lon_lat_alt))

def extract_positions(group, touchdown=touchdown):
    '''
    Map marker time -> [lon, lat, alt] strings in document order.

    Children lacking a name or Point/coordinates are skipped. A repeated time keeps its
    original slot but takes the later coordinates. The landing time returned is the last
    one processed, so the touchdown marker is expected to be the last in the folder.
    '''
    positions={}
    landing_time=None
    for marker in group.children:
        name_node=kml_tree.child(marker,'name')
        if name_node is None:
            continue
        point=kml_tree.child(marker,'Point')
        if point is None:
            continue
        coordinates=kml_tree.get_string(kml_tree.child(point,'coordinates'))
        if coordinates is None:
            continue

        time=marker_time(kml_tree.get_string(name_node),touchdown)
        positions[time]=parse_coordinates(coordinates)
        landing_time=time

    return positions,landing_time

def to_float(values):
    return pd.to_numeric(np.asarray(values,dtype=object),errors='coerce').astype(float)

def landing_offset(original, landing_spot=landing_spot):
    return np.array(landing_spot,dtype=float)-to_float(original)

def keyframes(positions, offset):
    Data=pd.DataFrame.from_dict(positions,orient='index',columns=columns)
    Data=Data.apply(pd.to_numeric,errors='coerce').astype(float)
    return Data+np.asarray(offset,dtype=float)

def format_number(x):
    '''
    Number as JavaScript prints it: no trailing .0 on integral values, NaN for NaN
    '''
    x=float(x)
    if np.isnan(x):
        return 'NaN'
    if np.isinf(x):
        return 'Infinity' if x>0 else '-Infinity'
    if x==int(x) and abs(x)<1e21:
        return str(int(x))
    return repr(x)

def header(source_name, offset, landing_spot, original):
    return ('-- The following keyframe data was converted from '+source_name+',\n'
            '-- which is available at http://apollo.mem-tek.com/GoogleMoonKMZ.html\n\n'
            '-- In the conversion, some assumptions and simplifications were made:\n'
            '--   * The descent markers in the KML have Point nodes expressed "relative to ground".\n'
            '--     We assume that the ground is fixed at altitude '+format_number(-landing_spot[2])+' meters below the reference ellipsoid,\n'
            '--     in order to match height data from a height map constructed from LRO data.\n'
            '--   * We manually offset the coordinates slightly, by '+format_number(offset[0])+' degrees in longitude and '
            +format_number(offset[1])+' degrees in latitude,\n'
            '--     in order to match the landing spot specified at long: '+format_number(landing_spot[0])+', lat: '
            +format_number(landing_spot[1])+' extracted from footage from LRO.\n'
            '--     The kml file provided long: '+str(original[0])+', lat: '+str(original[1])+' as the landing coordinates - hence the manual offset.\n'
            '--     If more accurate height/color maps are acquired, these values can be adjusted by running the conversion script again.\n\n')

def render_asset(frames):
    output="asset.export('keyframes', {\n"
    for time,row in frames.iterrows():
        output+=("    ['"+time+"'] = {\n"
                 '        Type = "GlobeTranslation",\n'
                 '        Globe = "Moon",\n'
                 '        Longitude = '+format_number(row['Longitude'])+',\n'
                 '        Latitude = '+format_number(row['Latitude'])+',\n'
                 '        Altitude = '+format_number(row['Altitude'])+',\n'
                 '        UseHeightmap = false\n'
                 '    },\n')
    return output+'})'

def convert(source, destination, group_name=group_name, touchdown=touchdown, landing_spot=landing_spot):
    '''
    Read the KML at source and write the keyframe asset to destination.

    Returns the corrected keyframes, or None (nothing written) when the descent marker
    folder is not in the document.
    '''
    tree=kml_tree.read(source)
    group=kml_tree.find(tree,kml_tree.has_name(group_name))
    if group is None:
        print('No descent markers were found.',file=sys.stderr)
        return None

    positions,landing_time=extract_positions(group,touchdown)
    if landing_time is None:
        raise ValueError(f'No marker in "{group_name}" has both a name and Point coordinates')

    original=positions[landing_time]
    offset=landing_offset(original,landing_spot)
    frames=keyframes(positions,offset)

    output=header(os.path.basename(source),offset,landing_spot,original)+render_asset(frames)
    with open(destination,'w',encoding='utf-8') as f:
        f.write(output)

    print(f'Converted {len(frames)} descent markers to {destination}')
    return frames

def plot_descent(frames, landing_spot, path):
    '''
    Quick look at the corrected trajectory: ground track and altitude profile
    '''
    time=pd.to_datetime(frames.index)

    plt.figure(figsize=(18,7))
    ax=plt.subplot(1,2,1)
    sc=plt.scatter(frames.Longitude,frames.Latitude,s=20,c=frames.Altitude,cmap='plasma',edgecolor='k')
    plt.plot(landing_spot[0],landing_spot[1],'*r',markersize=15)
    ax.set_aspect('equal')
    plt.xlabel(r'Longitude [$^\circ$]')
    plt.ylabel(r'Latitude [$^\circ$]')
    plt.xticks(rotation=30)
    plt.colorbar(sc,label='Altitude [m]')

    ax=plt.subplot(1,2,2)
    plt.plot(time,frames.Altitude,'.-k')
    plt.xlabel('Time (UTC)')
    plt.ylabel('Altitude [m]')
    plt.xticks(rotation=30)
    plt.grid()
    plt.tight_layout()

    plt.savefig(path)
    plt.close()

#%% Main
if __name__ == '__main__':
    warnings.filterwarnings('ignore')
    plt.close('all')

    # Usage: python apollo11_descent.py source.kml output.asset
    if len(sys.argv)>1:
        source=sys.argv[1]
        storage=sys.argv[2]

    frames=convert(source,storage)
    if frames is None:
        sys.exit(1)

#%% Plots
    if plot:
        os.makedirs(figures,exist_ok=True)
        plot_descent(frames,landing_spot,os.path.join(figures,'apollo11LemDescent.png'))
