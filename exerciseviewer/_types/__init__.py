from exerciseviewer._types.base import *
from exerciseviewer._types.exercise import (
    Exercise, ExerciseAltitude, ExerciseCadence, ExerciseFileType,
    ExercisePower, ExerciseSample, ExerciseSpeed, ExerciseTemperature,
    HeartRateLimit, Lap, LapAltitude, LapSpeed, LapTemperature, Position,
    RecordingMode)
from exerciseviewer._types import columns as special_columns
from exerciseviewer._types.activitydata import (
    ActivityData, fill_track_distances)
