#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The (small) part of the FIT profile this package needs.

Values are taken from the "Profile.xlsx" file that comes with the FIT SDK.
Only base types, the message numbers we care about and a few lookup tables
for naming devices and sports live here; field scaling is done by hand in
`_reading`.

"""
from math import isnan
import struct


class BaseType:
    __slots__ = ('name', 'identifier', 'fmt', 'parse')

    def __init__(self, **kwargs):
        for name, value in kwargs.items():
            setattr(self, name, value)

    @property
    def size(self):
        return struct.calcsize(self.fmt)

    @property
    def type_num(self):
        return self.identifier & 0x1F

    @property
    def is_string(self):
        return self.fmt == 's'


def parse_string(raw):
    raw = raw.split(b'\x00')[0]
    return raw.decode('utf-8', 'replace') if raw else None


BASE_TYPE_BYTE = BaseType(name='byte', identifier=0x0D, fmt='B', parse=lambda x: None if x == 0xFF else x)

# Decide how invalid values are to be handled with the `parse` attribute.
BASE_TYPES = {
    0x00: BaseType(name='enum',    identifier=0x00, fmt='B', parse=lambda x: None if x == 0xFF else x),
    0x01: BaseType(name='sint8',   identifier=0x01, fmt='b', parse=lambda x: None if x == 0x7F else x),
    0x02: BaseType(name='uint8',   identifier=0x02, fmt='B', parse=lambda x: None if x == 0xFF else x),
    0x83: BaseType(name='sint16',  identifier=0x83, fmt='h', parse=lambda x: None if x == 0x7FFF else x),
    0x84: BaseType(name='uint16',  identifier=0x84, fmt='H', parse=lambda x: None if x == 0xFFFF else x),
    0x85: BaseType(name='sint32',  identifier=0x85, fmt='i', parse=lambda x: None if x == 0x7FFFFFFF else x),
    0x86: BaseType(name='uint32',  identifier=0x86, fmt='I', parse=lambda x: None if x == 0xFFFFFFFF else x),
    0x07: BaseType(name='string',  identifier=0x07, fmt='s', parse=parse_string),
    0x88: BaseType(name='float32', identifier=0x88, fmt='f', parse=lambda x: None if isnan(x) else x),
    0x89: BaseType(name='float64', identifier=0x89, fmt='d', parse=lambda x: None if isnan(x) else x),
    0x0A: BaseType(name='uint8z',  identifier=0x0A, fmt='B', parse=lambda x: None if x == 0x0 else x),
    0x8B: BaseType(name='uint16z', identifier=0x8B, fmt='H', parse=lambda x: None if x == 0x0 else x),
    0x8C: BaseType(name='uint32z', identifier=0x8C, fmt='I', parse=lambda x: None if x == 0x0 else x),
    0x0D: BASE_TYPE_BYTE,
    0x8E: BaseType(name='sint64',  identifier=0x8E, fmt='q', parse=lambda x: None if x == 0x7FFFFFFFFFFFFFFF else x),
    0x8F: BaseType(name='uint64',  identifier=0x8F, fmt='Q', parse=lambda x: None if x == 0xFFFFFFFFFFFFFFFF else x),
    0x90: BaseType(name='uint64z', identifier=0x90, fmt='Q', parse=lambda x: None if x == 0x0 else x)}


# Global message numbers
# ----------------------
MESG_FILE_ID = 0
MESG_SESSION = 18
MESG_LAP = 19
MESG_RECORD = 20
MESG_DEVICE_INFO = 23
MESG_ACTIVITY = 34

GLOBAL_MESG_NUMS = {
    0: 'file_id',
    1: 'capabilities',
    2: 'device_settings',
    3: 'user_profile',
    4: 'hrm_profile',
    5: 'sdm_profile',
    6: 'bike_profile',
    7: 'zones_target',
    8: 'hr_zone',
    9: 'power_zone',
    10: 'met_zone',
    12: 'sport',
    15: 'goal',
    18: 'session',
    19: 'lap',
    20: 'record',
    21: 'event',
    23: 'device_info',
    26: 'workout',
    27: 'workout_step',
    31: 'course',
    34: 'activity',
    35: 'software',
    49: 'file_creator',
    78: 'hrv',
    101: 'length',
    206: 'field_description',
    207: 'developer_data_id',
}

TIMESTAMP_FIELD = 253


# Lookup tables for naming things
# -------------------------------
MANUFACTURERS = {
    1: 'garmin',
    2: 'garmin_fr405_antfs',
    3: 'zephyr',
    4: 'dayton',
    5: 'idt',
    6: 'srm',
    7: 'quarq',
    8: 'ibike',
    9: 'saris',
    10: 'spark_hk',
    11: 'tanita',
    12: 'echowell',
    13: 'dynastream_oem',
    14: 'nautilus',
    15: 'dynastream',
    16: 'timex',
    17: 'metrigear',
    18: 'xelic',
    19: 'beurer',
    20: 'cardiosport',
    21: 'a_and_d',
    22: 'hmm',
    23: 'suunto',
    24: 'thita_elektronik',
    25: 'gpulse',
    26: 'clean_mobile',
    27: 'pedal_brain',
    28: 'peaksware',
    29: 'saxonar',
    30: 'lemond_fitness',
    31: 'dexcom',
    32: 'wahoo_fitness',
    33: 'octane_fitness',
    34: 'archinoetics',
    35: 'the_hurt_box',
    36: 'citizen_systems',
    37: 'magellan',
    38: 'osynce',
    39: 'holux',
    40: 'concept2',
    42: 'one_giant_leap',
    43: 'ace_sensor',
    44: 'brim_brothers',
    45: 'xplova',
    46: 'perception_digital',
    47: 'bf1systems',
    48: 'pioneer',
    49: 'spantec',
    50: 'metalogics',
    51: '4iiiis',
    52: 'seiko_epson',
    53: 'seiko_epson_oem',
    54: 'ifor_powell',
    55: 'maxwell_guider',
    56: 'star_trac',
    57: 'breakaway',
    58: 'alatech_technology_ltd',
    59: 'mio_technology_europe',
    60: 'rotor',
    61: 'geonaute',
    62: 'id_bike',
    63: 'specialized',
    64: 'wtek',
    65: 'physical_enterprises',
    66: 'north_pole_engineering',
    67: 'bkool',
    68: 'cateye',
    69: 'stages_cycling',
    70: 'sigmasport',
    71: 'tomtom',
    72: 'peripedal',
    73: 'wattbike',
    76: 'moxy',
    77: 'ciclosport',
    78: 'powerbahn',
    79: 'acorn_projects_aps',
    80: 'lifebeam',
    81: 'bontrager',
    82: 'wellgo',
    83: 'scosche',
    84: 'magura',
    85: 'woodway',
    86: 'elite',
    87: 'nielsen_kellerman',
    88: 'dk_city',
    89: 'tacx',
    90: 'direction_technology',
    91: 'magtonic',
    92: '1partcarbon',
    93: 'inside_ride_technologies',
    94: 'sound_of_motion',
    95: 'stryd',
    96: 'icg',
    97: 'MiPulse',
    98: 'bsx_athletics',
    99: 'look',
    100: 'campagnolo_srl',
    101: 'body_bike_smart',
    102: 'praxisworks',
    103: 'limits_technology',
    104: 'topaction_technology',
    105: 'cosinuss',
    106: 'fitcare',
    107: 'magene',
    108: 'giant_manufacturing_co',
    109: 'tigrasport',
    110: 'salutron',
    111: 'technogym',
    112: 'bryton_sensors',
    113: 'latitude_limited',
    114: 'soaring_technology',
    115: 'igpsport',
    116: 'thinkrider',
    117: 'gopher_sport',
    118: 'waterrower',
    119: 'orangetheory',
    120: 'inpeak',
    121: 'kinetic',
    122: 'johnson_health_tech',
    123: 'polar_electro',
    124: 'seesense',
    125: 'nci_technology',
    255: 'development',
    257: 'healthandlife',
    258: 'lezyne',
    259: 'scribe_labs',
    260: 'zwift',
    261: 'watteam',
    262: 'recon',
    263: 'favero_electronics',
    264: 'dynovelo',
    265: 'strava',
    266: 'precor',
    267: 'bryton',
    268: 'sram',
    269: 'navman',
    270: 'cobi',
    271: 'spivi',
    272: 'mio_magellan',
    273: 'evesports',
    274: 'sensitivus_gauge',
    275: 'podoon',
    276: 'life_time_fitness',
    277: 'falco_e_motors',
    278: 'minoura',
    279: 'cycliq',
    280: 'luxottica',
    281: 'trainer_road',
    282: 'the_sufferfest',
    283: 'fullspeedahead',
    284: 'virtualtraining',
    285: 'feedbacksports',
    286: 'omata',
    287: 'vdo',
    288: 'magneticdays',
    289: 'hammerhead',
    290: 'kinetic_by_kurt',
    291: 'shapelog',
    292: 'dabuziduo',
    293: 'jetblack',
    294: 'coros',
    295: 'virtugo',
    296: 'velosense',
    5759: 'actigraphcorp',
}

# Garmin (and dynastream) product ids, named like the FIT SDK does.
GARMIN_PRODUCTS = {
    1: 'HRM1',
    2: 'AXH01',
    3: 'AXB01',
    4: 'AXB02',
    5: 'HRM2SS',
    6: 'DSI_ALF02',
    7: 'HRM3SS',
    8: 'HRM_RUN_SINGLE_BYTE_PRODUCT_ID',
    9: 'BSM',
    10: 'BCM',
    11: 'AXS01',
    12: 'HRM_TRI_SINGLE_BYTE_PRODUCT_ID',
    14: 'FR225_SINGLE_BYTE_PRODUCT_ID',
    473: 'FR301_CHINA',
    474: 'FR301_JAPAN',
    475: 'FR301_KOREA',
    494: 'FR301_TAIWAN',
    717: 'FR405',
    782: 'FR50',
    987: 'FR405_JAPAN',
    988: 'FR60',
    1011: 'DSI_ALF01',
    1018: 'FR310XT',
    1036: 'EDGE500',
    1124: 'FR110',
    1169: 'EDGE800',
    1199: 'EDGE500_TAIWAN',
    1213: 'EDGE500_JAPAN',
    1253: 'CHIRP',
    1274: 'FR110_JAPAN',
    1325: 'EDGE200',
    1328: 'FR910XT',
    1333: 'EDGE800_TAIWAN',
    1334: 'EDGE800_JAPAN',
    1341: 'ALF04',
    1345: 'FR610',
    1360: 'FR210_JAPAN',
    1380: 'VECTOR_SS',
    1381: 'VECTOR_CP',
    1386: 'EDGE800_CHINA',
    1387: 'EDGE500_CHINA',
    1410: 'FR610_JAPAN',
    1422: 'EDGE500_KOREA',
    1436: 'FR70',
    1446: 'FR310XT_4T',
    1461: 'AMX',
    1482: 'FR10',
    1497: 'EDGE800_KOREA',
    1499: 'SWIM',
    1537: 'FR910XT_CHINA',
    1551: 'FENIX',
    1555: 'EDGE200_TAIWAN',
    1561: 'EDGE510',
    1567: 'EDGE810',
    1570: 'TEMPE',
    1600: 'FR910XT_JAPAN',
    1623: 'FR620',
    1632: 'FR220',
    1664: 'FR910XT_KOREA',
    1688: 'FR10_JAPAN',
    1721: 'EDGE810_JAPAN',
    1735: 'VIRB_ELITE',
    1736: 'EDGE_TOURING',
    1742: 'EDGE510_JAPAN',
    1743: 'HRM_TRI',
    1752: 'HRM_RUN',
    1765: 'FR920XT',
    1821: 'EDGE510_ASIA',
    1822: 'EDGE810_CHINA',
    1823: 'EDGE810_TAIWAN',
    1836: 'EDGE1000',
    1837: 'VIVO_FIT',
    1853: 'VIRB_REMOTE',
    1885: 'VIVO_KI',
    1903: 'FR15',
    1907: 'VIVO_ACTIVE',
    1918: 'EDGE510_KOREA',
    1928: 'FR620_JAPAN',
    1929: 'FR620_CHINA',
    1930: 'FR220_JAPAN',
    1931: 'FR220_CHINA',
    1936: 'APPROACH_S6',
    1956: 'VIVO_SMART',
    1967: 'FENIX2',
    1988: 'EPIX',
    2050: 'FENIX3',
    2052: 'EDGE1000_TAIWAN',
    2053: 'EDGE1000_JAPAN',
    2061: 'FR15_JAPAN',
    2067: 'EDGE520',
    2070: 'EDGE1000_CHINA',
    2072: 'FR620_RUSSIA',
    2073: 'FR220_RUSSIA',
    2079: 'VECTOR_S',
    2100: 'EDGE1000_KOREA',
    2130: 'FR920XT_TAIWAN',
    2131: 'FR920XT_CHINA',
    2132: 'FR920XT_JAPAN',
    2134: 'VIRBX',
    2135: 'VIVO_SMART_APAC',
    2140: 'ETREX_TOUCH',
    2147: 'EDGE25',
    2148: 'FR25',
    2150: 'VIVO_FIT2',
    2153: 'FR225',
    2156: 'FR630',
    2157: 'FR230',
    2160: 'VIVO_ACTIVE_APAC',
    2161: 'VECTOR_2',
    2162: 'VECTOR_2S',
    2172: 'VIRBXE',
    2173: 'FR620_TAIWAN',
    2174: 'FR220_TAIWAN',
    2175: 'TRUSWING',
    2188: 'FENIX3_CHINA',
    2189: 'FENIX3_TWN',
    2192: 'VARIA_HEADLIGHT',
    2193: 'VARIA_TAILLIGHT_OLD',
    2204: 'EDGE_EXPLORE_1000',
    2219: 'FR225_ASIA',
    2225: 'VARIA_RADAR_TAILLIGHT',
    2226: 'VARIA_RADAR_DISPLAY',
    2238: 'EDGE20',
    2262: 'D2_BRAVO',
    2266: 'APPROACH_S20',
    2276: 'VARIA_REMOTE',
    2327: 'HRM4_RUN',
    2337: 'VIVO_ACTIVE_HR',
    2347: 'VIVO_SMART_GPS_HR',
    2348: 'VIVO_SMART_HR',
    2368: 'VIVO_MOVE',
    2398: 'VARIA_VISION',
    2406: 'VIVO_FIT3',
    2413: 'FENIX3_HR',
    2417: 'VIRB_ULTRA_30',
    2429: 'INDEX_SMART_SCALE',
    2431: 'FR235',
    2432: 'FENIX3_CHRONOS',
    2441: 'OREGON7XX',
    2444: 'RINO7XX',
    2496: 'NAUTIX',
    2530: 'EDGE_820',
    2531: 'EDGE_EXPLORE_820',
    2544: 'FENIX5S',
    2547: 'D2_BRAVO_TITANIUM',
    2567: 'VARIA_UT800',
    2593: 'RUNNING_DYNAMICS_POD',
    2604: 'FENIX5X',
    2606: 'VIVO_FIT_JR',
    2691: 'FR935',
    2697: 'FENIX5',
    2713: 'EDGE_1030',
    2909: 'EDGE_130',
    3112: 'EDGE_520_PLUS',
    10007: 'SDM4',
    10014: 'EDGE_REMOTE',
    20119: 'TRAINING_CENTER',
    65531: 'CONNECTIQ_SIMULATOR',
    65532: 'ANDROID_ANTPLUS_PLUGIN',
    65534: 'CONNECT',
}

# Manufacturers whose product ids follow the Garmin numbering.
GARMIN_NUMBERING = (1, 13, 15)

SPORTS = {
    0: 'generic',
    1: 'running',
    2: 'cycling',
    3: 'transition',
    4: 'fitness_equipment',
    5: 'swimming',
    6: 'basketball',
    7: 'soccer',
    8: 'tennis',
    9: 'american_football',
    10: 'training',
    11: 'walking',
    12: 'cross_country_skiing',
    13: 'alpine_skiing',
    14: 'snowboarding',
    15: 'rowing',
    16: 'mountaineering',
    17: 'hiking',
    18: 'multisport',
    19: 'paddling',
    20: 'flying',
    21: 'e_biking',
    22: 'motorcycling',
    23: 'boating',
    24: 'driving',
    25: 'golf',
    26: 'hang_gliding',
    27: 'horseback_riding',
    28: 'hunting',
    29: 'fishing',
    30: 'inline_skating',
    31: 'rock_climbing',
    32: 'sailing',
    33: 'ice_skating',
    34: 'sky_diving',
    35: 'snowshoeing',
    36: 'snowmobiling',
    37: 'stand_up_paddleboarding',
    38: 'surfing',
    39: 'wakeboarding',
    40: 'water_skiing',
    41: 'kayaking',
    42: 'rafting',
    43: 'windsurfing',
    44: 'kitesurfing',
    45: 'tactical',
    46: 'jumpmaster',
    47: 'boxing',
    48: 'floor_climbing',
    254: 'all',
}
