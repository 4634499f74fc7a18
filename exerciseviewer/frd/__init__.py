"""
Decode the raw memory dumps (*.frd) of Polar F6, F11 and FA20 wrist units.

These units record a summary only: heart rate figures, energy, four
heart rate zones and the unit's lifetime totals. There are no laps and no
samples.

"""
from exerciseviewer.frd._reading import read_and_format as read
from exerciseviewer.frd._reading import decode
