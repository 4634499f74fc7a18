"""
Decode the binary exercise files (*.srd, *.sr2) of the Polar S-series
(S510, S610, S710, S720i and friends).

A 96 byte header carries the summary figures and recording mode; laps and
then samples follow it back to back. Which fields a lap or sample holds
depends on the recording mode bits in the header.

"""
from exerciseviewer.srd._reading import read_and_format as read
from exerciseviewer.srd._reading import decode
