"""Sample navigation data files shared by the test suite."""

from pathlib import Path

NAV_DAT = """I
1200 Version - data cycle 2601, build 20260105, metadata NavXP1200.
3  40.63992500  -73.77869444     13 11390 130   -13.000 JFK  K6 US KENNEDY VORTAC
3  40.78388889  -73.86861111     11 11380  40   -13.000 LGA  K6 US LA GUARDIA VOR/DME
3  41.16750000  -73.12555556     11 10880  40   -14.000 BDR  K6 US BRIDGEPORT VOR
2  40.57063889  -73.88000000      0   390  25     0.000 BBN  K6 US BARREN ISLAND NDB
4  40.62991700  -73.76916700     12 10990  18  44570.211 IJFK KJFK K6 04L ILS-cat-III
6  40.65120000  -73.76110000     12 10990  10 30000044.500 IJFK KJFK K6 04L GS
8  40.61000000  -73.79000000     12     0   0     44.500 ---- KJFK K6 04L MM
12 40.63992500  -73.77869444     13 11390 130     0.000 JFK  K6 US KENNEDY VORTAC DME
99
"""

FIX_DAT = """I
1200 Version - data cycle 2601, build 20260105, metadata FixXP1200.
40.64166667  -73.82500000 CAMRN K6 KJFK 4530692
40.82000000  -73.40000000 MERIT K6 ENRT 2105430
41.00000000  -72.00000000 ABCDE K2 ENRT 2105430
99
"""

AWY_DAT = """I
1100 Version - data cycle 2601, build 20260105, metadata AwyXP1100.
JFK K6 3 MERIT K6 11 F 1 180 450 J60
MERIT K6 11 BDR K6 3 N 1 18 180 V229
BDR K6 3 NOWHR K6 11 N 1 18 180 V229
99
"""

AIRSPACE_TXT = """* OpenAir sample
AC B
AN NEW YORK CLASS B
AH 7000 MSL
AL SFC
DP 40:45:00 N 073:55:00 W
DP 40:45:00 N 073:35:00 W
DP 40:30:00 N 073:35:00 W
DP 40:30:00 N 073:55:00 W
AC R
AN CIRCLE ONLY
V X=40:40:00 N 073:47:00 W
DC 5
"""

CIFP_FIELDS = 38


def cifp_record(record_type: str, **fields: str) -> str:
    """Build one CIFP record; keyword names are ``f<index>``."""
    values = [""] * CIFP_FIELDS
    for name, value in fields.items():
        values[int(name[1:])] = value
    return f"{record_type}:" + ",".join(values)


CIFP_KJFK = "\n".join(
    [
        cifp_record("SID", f0="010", f1="1", f2="DEEZZ5", f3="RW04L", f4="RW04L", f5="K6", f6="G", f11="VA", f18="0440", f22="+", f23="00700"),
        cifp_record("SID", f0="020", f1="1", f2="DEEZZ5", f3="RW04L", f4="CAMRN", f5="K6", f6="E", f9="R", f11="DF", f22="+", f23="03000"),
        cifp_record("SID", f0="010", f1="4", f2="DEEZZ5", f3="RW31L", f4="MERIT", f5="K6", f6="E", f9="L", f11="TF", f18="0310", f19="0120", f22="B", f23="0500018000"),
        cifp_record("STAR", f0="010", f1="5", f2="PARCH3", f3="CCC", f4="JFK", f5="K6", f6="D", f11="IF"),
        cifp_record("STAR", f0="010", f1="2", f2="EMPTY1", f3="", f4="", f5="K6", f6="E", f11="IF"),
        cifp_record("APPCH", f0="010", f1="A", f2="I04L", f3="IJFK", f4="CAMRN", f5="K6", f6="E", f11="IF", f22="@", f23="02000", f25="210"),
        cifp_record("APPCH", f0="020", f1="A", f2="I04L", f3="IJFK", f4="XYZ12", f5="ZZ", f6="E", f11="TF", f22="B", f23="05000", f24="18000"),
        cifp_record("APPCH", f0="030", f1="A", f2="I04L", f3="IJFK", f4="RW04L", f5="K6", f6="G", f11="TF"),
    ]
)

HOLD_DAT = """I
1140 Version - data cycle 2601, build 20260105, metadata HoldXP1140.
CAMRN K6 KJFK 11 222.0 1.0 0.0 R 3000 17000 210
MERIT K6 ENRT 11 55.0 1.5 0.0 L 5000 18000 0
99
"""

MSA_DAT = """I
1150 Version - data cycle 2601, build 20260105, metadata MSAXP1150.
JFK K6 270 90 25 2000
JFK K6 90 270 25 3000
99
"""

APTMETA_DAT = """I
1100 Version - data cycle 2601, build 20260105, metadata AptMetaXP1100.
KJFK K6 40.639751 -73.778925 13 C 14511 I 18000 FL180
EGLL EG 51.477500 -0.461389 83 C 12799 I 6000 FL070
99
"""

GLOBAL_APT = """I
1200 Version - data cycle 2601, build 20260105

1      13 0 0 KJFK John F Kennedy Intl
1302 city New York
1302 datum_lat 40.639751
1302 datum_lon -73.778925
100 60.96 1 0 0.25 1 3 0 04L 40.62202 -73.78558 0 0 2 0 0 0 22R 40.64342 -73.76258 0 0 2 0 0 0
1      22 0 0 KLGA La Guardia
100 45.72 1 0 0.25 1 3 0 04 40.76945 -73.88403 0 0 2 0 0 0 22 40.78567 -73.86983 0 0 2 0 0 0
99
"""

CUSTOM_KJFK_APT = """A
1200 Generated by WorldEditor

1      14 0 0 KJFK Kennedy Custom
100 60.96 1 0 0.25 1 3 0 04L 40.63000 -73.77000 0 0 2 0 0 0 22R 40.64342 -73.76258 0 0 2 0 0 0
99
"""


def write_file(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
