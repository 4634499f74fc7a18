"""
Decode Garmin Training Center XML (*.tcx) files.

Only the first ``Activity`` of a file is read. Trackpoints become samples,
and the per-lap summaries Garmin writes give the duration, distance, heart
rate and energy figures.

"""
from exerciseviewer.tcx._reading import read_and_format as read
from exerciseviewer.tcx._reading import decode
