# This file is part of epicycle,  distributed under license LGPL v3

''' Logging setup for the `epicycle` namespace.

	The library modules only create their loggers with `logging.getLogger(__name__)`, nothing is configured on import. An application wanting to see the solver diagnostics calls `setup_logging` once.
'''

import logging
import sys


def setup_logging(level=logging.INFO, file=None) -> logging.Logger:
	''' Configure the logger of the `epicycle` namespace

		Parameters:
			level:	logging level (eg. `logging.DEBUG`, `logging.INFO`)
			file:	optional path of a file where to save the logs too
	'''
	logger = logging.getLogger('epicycle')
	logger.setLevel(level)

	# avoid duplicate logs when called several times
	if logger.hasHandlers():
		logger.handlers.clear()

	formatter = logging.Formatter(
		'%(asctime)s - %(name)s - %(levelname)s - %(message)s',
		datefmt='%H:%M:%S')

	console = logging.StreamHandler(sys.stdout)
	console.setLevel(level)
	console.setFormatter(formatter)
	logger.addHandler(console)

	if file:
		handler = logging.FileHandler(file, mode='w', encoding='utf-8')
		handler.setLevel(level)
		handler.setFormatter(formatter)
		logger.addHandler(handler)

	logger.debug('logging initialized')
	return logger
