#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from datetime import datetime

import pytest

from exerciseviewer import tcx
from exerciseviewer._types import ExerciseFileType, Position
from exerciseviewer._util.exceptions import (
    BadMagicError, CorruptFileError, NotAnExerciseError)


TRACKPOINT = '''
          <Trackpoint>
            <Time>{time}</Time>
            <Position>
              <LatitudeDegrees>{lat}</LatitudeDegrees>
              <LongitudeDegrees>-1.2168</LongitudeDegrees>
            </Position>
            <AltitudeMeters>{alt}</AltitudeMeters>
            <DistanceMeters>{dist}</DistanceMeters>
            <HeartRateBpm><Value>{hr}</Value></HeartRateBpm>
            <Cadence>{cad}</Cadence>
            <Extensions>
              <TPX xmlns="http://www.garmin.com/xmlschemas/ActivityExtension/v2">
                <Speed>5.0</Speed>
                <Watts>{watts}</Watts>
              </TPX>
            </Extensions>
          </Trackpoint>'''

LAP = '''
      <Lap StartTime="{start}">
        <TotalTimeSeconds>{seconds}</TotalTimeSeconds>
        <DistanceMeters>{distance}</DistanceMeters>
        <MaximumSpeed>6.0</MaximumSpeed>
        <Calories>{calories}</Calories>
        <AverageHeartRateBpm><Value>{hr_avg}</Value></AverageHeartRateBpm>
        <MaximumHeartRateBpm><Value>{hr_max}</Value></MaximumHeartRateBpm>
        <Intensity>Active</Intensity>
        <TriggerMethod>Manual</TriggerMethod>
        <Track>{trackpoints}
        </Track>
      </Lap>'''

DOCUMENT = '''<?xml version="1.0" encoding="UTF-8"?>
<TrainingCenterDatabase
    xmlns="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2">
  <Activities>
    <Activity Sport="Biking">
      <Id>2015-03-24T15:19:06.000Z</Id>{laps}
      <Creator>
        <Name>Edge 500</Name>
      </Creator>
    </Activity>
    <Activity Sport="Running">
      <Id>2015-03-25T08:00:00Z</Id>
    </Activity>
  </Activities>
</TrainingCenterDatabase>'''


def make_document(trackpoint=TRACKPOINT):
    first = [trackpoint.format(time='2015-03-24T15:19:%02d.000Z' % (6 + i),
                               lat=52.7595 + i / 1e4, alt=100 + i,
                               dist=5 * i, hr=120 + i, cad=80, watts=200)
             for i in range(3)]
    second = [trackpoint.format(time='2015-03-24T15:19:%02d.000Z' % (16 + i),
                                lat=52.7605, alt=110 - i, dist=50 + 5 * i,
                                hr=140, cad=90, watts=300)
              for i in range(2)]
    laps = (LAP.format(start='2015-03-24T15:19:06.000Z', seconds=10,
                       distance=50, calories=10, hr_avg=121, hr_max=122,
                       trackpoints=''.join(first)) +
            LAP.format(start='2015-03-24T15:19:16.000Z', seconds=30,
                       distance=100, calories=20, hr_avg=141, hr_max=145,
                       trackpoints=''.join(second)))
    return DOCUMENT.format(laps=laps).encode('utf-8')


# setup
exercise = tcx.decode(make_document())


def test_summary():
    assert exercise.file_type is ExerciseFileType.GARMIN_TCX
    assert exercise.sport == 'Biking'
    assert exercise.device_name == 'Edge 500'
    assert exercise.date_time == datetime(2015, 3, 24, 15, 19, 6)
    assert exercise.duration == 400
    assert exercise.energy == 30
    assert exercise.heart_rate_avg == 136   # (121*10 + 141*30) / 40
    assert exercise.heart_rate_max == 145


def test_blocks():
    assert exercise.speed.distance == 150
    assert exercise.speed.speed_avg == pytest.approx(13.5)
    assert exercise.speed.speed_max == pytest.approx(21.6)

    altitude = exercise.altitude
    assert (altitude.altitude_min, altitude.altitude_max) == (100, 110)
    assert altitude.ascent == 10

    assert exercise.cadence.cadence_max == 90
    assert exercise.power.power_max == 300
    assert exercise.temperature is None
    assert exercise.recording_mode.location


def test_samples():
    samples = exercise.sample_list
    assert [s.timestamp for s in samples] == [0, 1000, 2000, 10000, 11000]
    assert [s.heart_rate for s in samples] == [120, 121, 122, 140, 140]
    assert samples[0].speed == pytest.approx(18.0)
    assert samples[0].position == Position(52.7595, -1.2168)
    assert samples[4].distance == 55 and samples[4].altitude == 109


def test_laps():
    first, second = exercise.lap_list
    assert (first.time_split, second.time_split) == (100, 400)
    assert first.heart_rate_avg == 121 and second.heart_rate_max == 145
    assert first.heart_rate_split == 122
    assert (first.speed.distance, second.speed.distance) == (50, 150)
    assert first.speed.speed_avg == pytest.approx(18.0)
    assert second.speed.speed_avg == pytest.approx(12.0)
    assert second.altitude.altitude == 109
    assert (first.altitude.ascent, second.altitude.ascent) == (2, 10)
    assert second.position_split == Position(52.7605, -1.2168)


def test_distance_from_positions():
    no_distance = TRACKPOINT.replace('<DistanceMeters>{dist}</DistanceMeters>',
                                     '')
    samples = tcx.decode(make_document(no_distance)).sample_list
    assert [s.distance for s in samples[:3]] == [0, 11, 22]


def test_timezone():
    berlin = tcx.decode(make_document(), tz_str='Europe/Berlin')
    assert berlin.date_time == datetime(2015, 3, 24, 16, 19, 6)


def test_bad_files():
    with pytest.raises(BadMagicError):
        tcx.decode(b'<gpx><trk/></gpx>')

    with pytest.raises(BadMagicError):
        tcx.decode(b'\x0e\x10FIT')

    with pytest.raises(NotAnExerciseError):
        tcx.decode(b'<TrainingCenterDatabase><Activities/>'
                   b'</TrainingCenterDatabase>')

    with pytest.raises(CorruptFileError):
        tcx.decode(make_document().replace(b'<Calories>10<',
                                           b'<Calories>ten<'))
