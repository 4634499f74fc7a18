__version__ = '0.1.0'
"""
Decode sports watch and bike computer recordings into one exercise record.

    >>> import exerciseviewer as ev
    >>> exercise = ev.parse('2010-07-04-06-07-36.fit', tz_str='Europe/Berlin')
    >>> exercise.device_name
    'Garmin EDGE500'
    >>> data = ev.ActivityData.from_exercise(exercise)

Supported file types: fit, tcx, hrm, hsr, srd/sr2 and frd.

"""
from exerciseviewer._util.reader import parse, parse_bytes
from exerciseviewer._types import (
    ActivityData, Exercise, ExerciseAltitude, ExerciseCadence,
    ExerciseFileType, ExercisePower, ExerciseSample, ExerciseSpeed,
    ExerciseTemperature, HeartRateLimit, Lap, LapAltitude, LapSpeed,
    LapTemperature, Position, RecordingMode)
from exerciseviewer._util.exceptions import (
    BadCRCError, BadHeaderError, BadMagicError, CorruptFileError,
    ExerciseFileNotFoundError, ExerciseViewerError, MissingDefinitionError,
    NotAnExerciseError, RequiredColumnError, TruncatedInputError,
    UnknownBaseTypeError, UnsupportedFormatError)
