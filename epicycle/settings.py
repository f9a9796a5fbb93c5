''' The settings module holds dictionaries for each aspect of the epicycle library.

dictionaries:
	:solver:	tolerances of the kinematic linear system
	:phasing:	limits of the phasing engine
	:layout:	geometric settings of the stage base layout
	:messages:	localization of the status messages
'''

from math import pi
import sys, os, yaml
from os.path import dirname, exists

# numerical tolerances of the velocity solver
solver = {
	'pivot_tolerance': 1e-9,	# below this magnitude a pivot is considered null when computing ranks
	'singular_tolerance': 1e-15,	# below this magnitude a pivot is skipped when solving the normal equations
	'ratio_tolerance': 1e-12,	# below this magnitude a ratio denominator is considered null, the ratio is then nan
	'null_tolerance': 1e-9,	# a variable with a null space component above this is reported as undetermined
	}

phasing = {
	'max_copies': 5,	# maximum number of planet chain copies around a carrier
	}

layout = {
	'module': 1.,	# gear module: pitch diameter per tooth
	'ring_clearance': 1.05,	# the ring is used for layout only when larger than this factor times the first planet radius
	'min_gap': 1.,	# minimum distance of a planet center to the stage axis
	'bisection_steps': 32,	# number of halvings when bending a chain of 3+ planets
	'max_bend': 0.9*pi,	# maximum angle between successive links of a bent chain
	'tolerance': 1e-6,	# distance tolerance above which a bent chain is considered missing its target
	}

messages = {
	'language': 'en',	# default language for rendering messages, 'en' or 'pt'
	}


# get configuration directory depending on OS
if sys.platform == 'win32':
	home = os.getenv('USERPROFILE') or ''
	configdir = home+'/AppData/Local'
else:
	home = os.getenv('HOME') or ''
	configdir = home+'/.config'

config = configdir+'/epicycle/epicycle.yaml'
settings = {'solver':solver, 'phasing':phasing, 'layout':layout, 'messages':messages}


def install():
	''' Create and fill the config directory if not already existing '''
	if not exists(config):
		os.makedirs(dirname(config), exist_ok=True)
		dump()

def clean():
	''' Delete the default configuration file '''
	os.remove(config)

def load(file=None):
	''' Load the settings directly in this module, from the specified file or the default one '''
	if not file:	file = config
	if isinstance(file, str):
		with open(file, 'r') as stream:
			changes = yaml.safe_load(stream)
	else:
		changes = yaml.safe_load(file)
	def update(dst, src):
		for key in dst:
			if key in src:
				if isinstance(dst[key], dict) and isinstance(src[key], dict):
					update(dst[key], src[key])
				else:
					dst[key] = src[key]
	update(settings, changes or {})

def dump(file=None):
	''' Write the current settings into the specified file or to the default one '''
	if not file:	file = config
	if isinstance(file, str):
		with open(file, 'w') as stream:
			stream.write(yaml.dump(settings, default_flow_style=None, width=40, indent=4))
	else:
		file.write(yaml.dump(settings, default_flow_style=None, width=40, indent=4))


# automatically load settings if the file exist
try:	load()
except FileNotFoundError:	pass
