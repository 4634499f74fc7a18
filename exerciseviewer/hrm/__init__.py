"""
Decode the Polar Precision Performance text format (*.hrm).

The file is made of ``[Section]`` blocks. ``[Params]`` always comes first
and says what was recorded; ``[HRData]`` holds one sample per row, with
its columns picked by the ``SMode`` flags. Laps live in ``[IntTimes]``,
five rows each, and ``[Trip]`` carries the bike computer summary.

"""
from exerciseviewer.hrm._reading import read_and_format as read
from exerciseviewer.hrm._reading import decode
