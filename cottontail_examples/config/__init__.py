"""Examples configuration"""

import logging
from dotenv import load_dotenv

from .loader import load_raw_config
from .cottontail import Cottontail
from .examples import Examples

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=logging.INFO)

_RAW_CONFIG = load_raw_config()

cottontail = Cottontail(_RAW_CONFIG)
examples = Examples(_RAW_CONFIG)


class Config:
    cottontail = cottontail
    examples = examples


__all__ = ["cottontail", "examples", "Config", "Cottontail", "Examples", "load_raw_config"]
