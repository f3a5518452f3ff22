import logging
import logging.config
from typing import Optional

log_format = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


def setup_logging(default_level="WARNING", info_loggers=None, debug_loggers=None,
                  more_loggers=None, log_file: Optional[str] = None):
    # Anything written to the terminal while the TUI owns it corrupts the
    # screen, so without a log file records go through textual's handler.
    if log_file:
        handler = {
            'level': 'DEBUG',
            'formatter': 'standard',
            'class': 'logging.FileHandler',
            'filename': str(log_file),
            'encoding': 'utf-8',
        }
    else:
        handler = {
            'level': 'DEBUG',
            'formatter': 'standard',
            'class': 'textual.logging.TextualHandler',
        }
    config_dict = {
        'version': 1,
        'disable_existing_loggers': True,
        'formatters': {
            'standard': {
                'format': log_format,
            },
        },
        'handlers': {
            'default': handler,
        },
        'loggers': {
            '': {  # root logger
                'handlers': ['default'],
                'level': default_level,
                'propagate': False
            },
        }
    }
    if info_loggers is None:
        info_loggers = []
    if debug_loggers is None:
        debug_loggers = []

    def add_one(logger):
        if logger.name in info_loggers:
            level = "INFO"
        elif logger.name in debug_loggers:
            level = "DEBUG"
        else:
            level = default_level
        l_dict = {
            'handlers': ['default'],
            'level': level,
            'propagate': False
        }
        config_dict['loggers'][logger.name] = l_dict
    if more_loggers:
        for logger in more_loggers:
            add_one(logger)
    for logger in get_loggers():
        add_one(logger)

    logging.config.dictConfig(config_dict)


def get_loggers():
    res = []
    res.append(logging.getLogger("Discovery"))
    res.append(logging.getLogger("Player"))
    res.append(logging.getLogger("Waveform"))
    res.append(logging.getLogger("SessionController"))
    res.append(logging.getLogger("Converter"))
    res.append(logging.getLogger("TagWriter"))
    res.append(logging.getLogger("Finalizer"))
    res.append(logging.getLogger("TaggerApp"))
    return res
