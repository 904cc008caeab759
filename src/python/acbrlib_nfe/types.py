# acbrlib_nfe/types.py

"""
Type-safe enumerations shared by the ACBrLibNFe binding.

The numeric values correspond directly to the codes expected by the
native component; they are passed through unchanged.
"""
from enum import Enum, IntEnum

class StatusCode(IntEnum):
    """Status codes returned by every native export. Zero is success."""
    OK = 0
    INITIALIZATION_FAILED = -1
    FINALIZATION_FAILED = -2
    CONFIG_READ_FAILED = -3
    INVALID_VALUE = -4
    FILE_NOT_FOUND = -5
    DIRECTORY_NOT_FOUND = -6
    HTTP_ERROR = -7
    EXECUTION_FAILED = -10
    XML_VALIDATION_FAILED = -11
    KEY_VALIDATION_FAILED = -12
    INDEX_OUT_OF_RANGE = -13
    XML_GENERATION_FAILED = -14
    INVALID_BATCH_SIZE = -17

class UFCode(IntEnum):
    """IBGE numeric code of each Brazilian federative unit."""
    AC = 12
    AL = 27
    AM = 13
    AP = 16
    BA = 29
    CE = 23
    DF = 53
    ES = 32
    GO = 52
    MA = 21
    MG = 31
    MS = 50
    MT = 51
    PA = 15
    PB = 25
    PE = 26
    PI = 22
    PR = 41
    RJ = 33
    RN = 24
    RO = 11
    RR = 14
    RS = 43
    SC = 42
    SE = 28
    SP = 35
    TO = 17

class UF(str, Enum):
    """Two-letter initials of each federative unit, sent as text."""
    AC = "AC"
    AL = "AL"
    AM = "AM"
    AP = "AP"
    BA = "BA"
    CE = "CE"
    DF = "DF"
    ES = "ES"
    GO = "GO"
    MA = "MA"
    MG = "MG"
    MS = "MS"
    MT = "MT"
    PA = "PA"
    PB = "PB"
    PE = "PE"
    PI = "PI"
    PR = "PR"
    RJ = "RJ"
    RN = "RN"
    RO = "RO"
    RR = "RR"
    RS = "RS"
    SC = "SC"
    SE = "SE"
    SP = "SP"
    TO = "TO"

class NFeModel(IntEnum):
    NFE = 55
    NFCE = 65

class EmissionType(IntEnum):
    """Emission type (`tpEmis`) used when generating access keys."""
    NORMAL = 1
    CONTINGENCY = 2
    SCAN = 3
    DPEC = 4
    FSDA = 5
    SVCAN = 6
    SVCRS = 7
    SVCSP = 8
    OFFLINE = 9

class PathType(IntEnum):
    """Kind of document whose storage folder `get_path` reports."""
    NFE = 0
    UNUSABLE = 1
    CCE = 2
    CANCELLATION = 3

class PrintFlag(str, Enum):
    """Boolean flags the print export receives as text."""
    YES = "True"
    NO = "False"
