# spot_exporter/logging_setup.py
import logging
import logging.config

import yaml

FALLBACK_FORMAT = '{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","msg":"%(message)s"}'


def load_logging_config(path="config/logging.yaml", level=None):
    try:
        with open(path) as f:
            cfg = yaml.safe_load(f)
        logging.config.dictConfig(cfg)
    except (OSError, ValueError, TypeError, AttributeError, yaml.YAMLError):
        logging.basicConfig(level=logging.INFO, format=FALLBACK_FORMAT)
    if level:
        logging.getLogger().setLevel(level.upper())
