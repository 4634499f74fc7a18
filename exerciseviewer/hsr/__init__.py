"""
Decode the Polar summary text format (*.hsr).

An HSR file is an HRM file with extra summary sections: ``[Summary]``
(heart rate, energy and lifetime totals), ``[HRZones]`` and
``[Summary-123]`` (seconds below, within and above each zone).

"""
from exerciseviewer.hsr._reading import read_and_format as read
from exerciseviewer.hsr._reading import decode
