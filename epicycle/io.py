# This file is part of epicycle,  distributed under license LGPL v3

''' Reading and writing transmissions and models.

	A transmission file holds the stage descriptions and the known speeds, couplings and ratios. In YAML:

		stages:
		  - {id: 1, sun: 20, planets: [20], ring: 60, copies: 3}
		speeds:
		  - {var: {sun: 1}, value: 10}
		  - {var: {ring: 1}, lock: true}
		couplings: []
		ratios:
		  - {id: input/output, num: {sun: 1}, den: {carrier: 1}}

	Stage variables are written by role and stage (`{planet: [stage, index]}` for planets), so files never rely on generated variable names.

	The content read is a dictionary of keyword arguments for `build_model` and `evaluate`:

		>>> evaluate(**read('transmission.yaml'))
'''

import json
import os
import logging
import yaml

from .model import Var, Element, Mesh, Known, Equal, Lock, Ratio, Model, ROLES
from .stage import Stage

__all__ = [
	'FileFormatError', 'read', 'write',
	'transmission_to_dict', 'transmission_from_dict', 'model_to_dict', 'model_from_dict',
	'encode_var', 'decode_var',
	]

logger = logging.getLogger(__name__)


class FileFormatError(Exception):	pass


def filetype(name, type=None):
	''' get the name for the file format, using the given forced type or the name extension '''
	if not type:
		base = os.path.basename(name)
		type = base[base.rfind('.')+1:]  if '.' in base else  ''
	if not type:
		raise FileFormatError('unable to guess the file type')
	return type

def read(name: str, type=None, **opts) -> dict:
	''' load a transmission from a file, guessing its file type '''
	type = filetype(name, type)
	reader = globals().get(type+'_read')
	if reader:
		logger.info('reading %s', name)
		return transmission_from_dict(reader(name, **opts))
	else:
		raise FileFormatError('no read function available for format '+type)

def write(transmission: dict, name: str, type=None, **opts):
	''' write a transmission to a file, guessing its file type

		`transmission` is a dictionary with the keys `stages`, `speeds`, `couplings`, `ratios`, as returned by `read`
	'''
	type = filetype(name, type)
	writer = globals().get(type+'_write')
	if writer:
		logger.info('writing %s', name)
		return writer(transmission_to_dict(**transmission), name, **opts)
	else:
		raise FileFormatError('no write function available for format '+type)


'''
	YAML is loaded using pyyaml in safe mode
'''

def yaml_read(file, **opts):
	with open(file, 'r', encoding='utf-8') as stream:
		data = yaml.safe_load(stream)
	if not isinstance(data, dict):
		raise FileFormatError('a transmission file must contain a mapping')
	return data

def yaml_write(data, file, **opts):
	with open(file, 'w', encoding='utf-8') as stream:
		yaml.safe_dump(data, stream, default_flow_style=None, sort_keys=False, allow_unicode=True, **opts)

yml_read = yaml_read
yml_write = yaml_write


'''
	JSON is loaded using the builtin json module
'''

def json_read(file, **opts):
	with open(file, 'r', encoding='utf-8') as stream:
		try:
			data = json.load(stream, **opts)
		except json.JSONDecodeError as err:
			raise FileFormatError('invalid json: {}'.format(err)) from err
	if not isinstance(data, dict):
		raise FileFormatError('a transmission file must contain an object')
	return data

def json_write(data, file, **opts):
	with open(file, 'w', encoding='utf-8') as stream:
		json.dump(data, stream, indent=opts.pop('indent', 2), ensure_ascii=False, **opts)


#-- conversions to plain data ---------

def encode_var(var):
	''' plain data representation of a velocity variable '''
	if isinstance(var, Var):
		if var.role == 'planet':
			return {var.role: [var.stage, var.planet]}
		return {var.role: var.stage}
	return var

def decode_var(data):
	''' velocity variable from its plain data representation '''
	if isinstance(data, dict):
		if len(data) != 1 or next(iter(data)) not in ROLES:
			raise FileFormatError('a variable must be given by one role among {}, got {}'.format(ROLES, data))
		role, value = next(iter(data.items()))
		if role == 'planet':
			if not isinstance(value, (list, tuple)) or len(value) != 2:
				raise FileFormatError('a planet variable must be given as [stage, index], got {}'.format(value))
			return Var(role, value[0], value[1])
		return Var(role, value)
	if isinstance(data, list):
		raise FileFormatError('unable to decode variable {}'.format(data))
	return data


def transmission_to_dict(stages=(), speeds=(), couplings=(), ratios=()) -> dict:
	''' plain data representation of a transmission, the arguments are the ones of `build_model` '''
	data = {'stages': [], 'speeds': [], 'couplings': [], 'ratios': []}
	for stage in stages:
		item = {'id': stage.id}
		if stage.sun is not None:	item['sun'] = stage.sun
		item['planets'] = list(stage.planets)
		if stage.ring is not None:	item['ring'] = stage.ring
		item['copies'] = stage.copies
		data['stages'].append(item)
	for speed in speeds:
		if isinstance(speed, Lock):
			data['speeds'].append({'var': encode_var(speed.var), 'lock': True})
			continue
		var, value = (speed.var, speed.value)  if isinstance(speed, Known) else  speed
		data['speeds'].append({'var': encode_var(var), 'value': value})
	for coupling in couplings:
		a, b = (coupling.a, coupling.b)  if isinstance(coupling, Equal) else  coupling
		data['couplings'].append({'a': encode_var(a), 'b': encode_var(b)})
	for i, ratio in enumerate(ratios):
		if not isinstance(ratio, Ratio):
			ratio = Ratio('input/output' if i == 0 else 'input/output{}'.format(i), *ratio)
		data['ratios'].append({'id': ratio.id, 'num': encode_var(ratio.num), 'den': encode_var(ratio.den)})
	return data

def transmission_from_dict(data: dict) -> dict:
	''' transmission from its plain data representation, as keyword arguments for `build_model` '''
	try:
		stages = [Stage(
					id = item['id'],
					sun = item.get('sun'),
					planets = list(item.get('planets') or []),
					ring = item.get('ring'),
					copies = item.get('copies', 1),
					)
				for item in data.get('stages') or []]
		speeds = [Lock(decode_var(item['var']))  if item.get('lock') else  Known(decode_var(item['var']), item['value'])
					for item in data.get('speeds') or []]
		couplings = [Equal(decode_var(item['a']), decode_var(item['b']))  for item in data.get('couplings') or []]
		ratios = [Ratio(item.get('id', 'input/output'), decode_var(item['num']), decode_var(item['den']))
					for item in data.get('ratios') or []]
	except (KeyError, TypeError) as err:
		raise FileFormatError('malformed transmission: {}'.format(err)) from err
	return dict(stages=stages, speeds=speeds, couplings=couplings, ratios=ratios)


def model_to_dict(model: Model) -> dict:
	''' plain data representation of a model '''
	constraints = []
	for constraint in model.constraints:
		if isinstance(constraint, Known):
			constraints.append({'kind': 'known', 'var': encode_var(constraint.var), 'value': constraint.value})
		elif isinstance(constraint, Equal):
			constraints.append({'kind': 'equal', 'a': encode_var(constraint.a), 'b': encode_var(constraint.b)})
		elif isinstance(constraint, Lock):
			constraints.append({'kind': 'lock', 'var': encode_var(constraint.var)})
	meshes = []
	for mesh in model.meshes:
		item = {'i': encode_var(mesh.i), 'j': encode_var(mesh.j), 'carrierVar': encode_var(mesh.carrier)}
		if mesh.sign is not None:	item['sign'] = mesh.sign
		else:						item['kind'] = mesh.kind
		meshes.append(item)
	return {
		'elements': [
			{'id': e.id, 'kind': e.kind, 'teeth': e.teeth, 'velocityVar': encode_var(e.var)}
			for e in model.elements],
		'carriers': [encode_var(var)  for var in model.carriers],
		'meshes': meshes,
		'constraints': constraints,
		'ratioRequests': [
			{'id': r.id, 'numVar': encode_var(r.num), 'denVar': encode_var(r.den)}
			for r in model.ratios],
		}

def model_from_dict(data: dict) -> Model:
	''' model from its plain data representation '''
	try:
		elements = [Element(item['id'], item['kind'], item.get('teeth'), decode_var(item['velocityVar']))
					for item in data.get('elements') or []]
		meshes = [Mesh(decode_var(item['i']), decode_var(item['j']), decode_var(item['carrierVar']),
						item.get('kind', 'external') if 'sign' not in item else None,
						item.get('sign'))
					for item in data.get('meshes') or []]
		constraints = []
		for item in data.get('constraints') or []:
			kind = item['kind']
			if kind == 'known':		constraints.append(Known(decode_var(item['var']), item.get('value', 0.)))
			elif kind == 'equal':	constraints.append(Equal(decode_var(item['a']), decode_var(item['b'])))
			elif kind == 'lock':	constraints.append(Lock(decode_var(item['var'])))
			else:
				raise FileFormatError('unknown constraint kind: {}'.format(repr(kind)))
		ratios = [Ratio(item['id'], decode_var(item['numVar']), decode_var(item['denVar']))
					for item in data.get('ratioRequests') or []]
		carriers = [decode_var(var)  for var in data.get('carriers') or []]
	except (KeyError, TypeError) as err:
		raise FileFormatError('malformed model: {}'.format(err)) from err
	return Model(elements, meshes, constraints, ratios, carriers)
