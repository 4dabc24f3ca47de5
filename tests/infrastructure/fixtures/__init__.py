"""Sample NMEA sentences for capture testing.

Every sentence carries its correct checksum unless the name says otherwise.

Usage:
    from tests.infrastructure.fixtures import GGA_REFERENCE

    engine.feed(GGA_REFERENCE + b"\\r\\n")
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent

GGA_REFERENCE = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"
GGA_EMPTY_ALTITUDE = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,,,46.9,M,,*24"
GGA_NO_FIX = b"$GPGGA,123519,,,,,0,00,,,,,,,*6B"
GGA_WITH_CORRECTION = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,-12.5,M,46.9,M,2.5,0120*76"
GGA_BAD_CHECKSUM = b"$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*00"
GNGGA_REFERENCE = b"$GNGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*59"

RMC_REFERENCE = b"$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W,A*07"
RMC_NMEA20 = b"$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"
RMC_SOUTH_WEST = b"$GPRMC,123519.25,A,4807.038,S,01131.000,W,022.4,084.4,230394,003.1,W,A*21"
RMC_NO_DATE = b"$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,,003.1,W,A*08"
RMC_VOID = b"$GPRMC,225446.50,V,,,,,,,191194,,,N*7E"

VTG_REFERENCE = b"$GPVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*25"
VTG_NMEA20 = b"$GPVTG,054.7,T,034.4,M,005.5,N,010.2,K*48"
VTG_EMPTY = b"$GPVTG,,T,,M,,N,,K,N*2C"

ZDA_REFERENCE = b"$GPZDA,201530.00,04,07,2002,00,00*60"
ZDA_LOCAL_ZONE = b"$GPZDA,201530.00,04,07,2002,-05,30*4B"
ZDA_EMPTY_DATE = b"$GPZDA,201530.00,,,,,*63"

# One burst as a receiver typically emits it each second
RECEIVER_BURST = b"\r\n".join([GGA_REFERENCE, RMC_REFERENCE, VTG_REFERENCE, ZDA_REFERENCE]) + b"\r\n"
