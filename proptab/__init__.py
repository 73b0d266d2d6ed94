"""
proptab - Persistent property tables.
Java-style .properties files: forgiving reader, escaping writer, chained defaults.
"""

__version__ = "0.1.0"

from proptab.spec import EXTENSION
from proptab.table import PropertyTable
from proptab.reader import PropertiesReader
from proptab.writer import PropertiesWriter, encode_comment, encode_pair
from proptab.codec import decode_escape, encode_escape, unescape
from proptab.getopt import END_OPTION, MissingArgument, OptionError, OptionParser
