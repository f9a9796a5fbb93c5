# This file is part of epicycle,  distributed under license LGPL v3

''' Assemblability of planetary stages.

	Gears meshing on a carrier share the same module, so their pitch radii are proportional to their tooth counts. Whether a chain of planets can close between a sun and a ring then only depends on tooth counts:

	- a single planet must exactly fill the gap: `Na = Ns + 2 Np`
	- a chain of several planets can bend to reach a smaller ring, but can never stretch beyond its straight length: `Na <= Ns + 2 ∑Np`

	`validate_stage_assembly` checks a single stage from its description, `analyze_topology` checks every sun-ring path of a whole model.
'''

import logging
import numbers
from collections import deque
from dataclasses import dataclass, field
from math import pi, sin, ceil, isfinite
from typing import Optional

from .mathutils import roundhalf
from .model import Model
from .messages import Message

__all__ = ['validate_stage_assembly', 'analyze_topology', 'AssemblyStatus', 'TopologyPath', 'TopologySummary', 'shortest_path']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssemblyStatus:
	''' Assemblability of a stage

		Attributes:
			kind:		'open', 'straight', 'curved' or 'impossible'
			valid:		False when the stage cannot be assembled
			message:	a `Message` explaining the status
	'''
	kind: str
	valid: bool
	message: Message


def validate_stage_assembly(sun, planets, ring, copies=1) -> AssemblyStatus:
	''' Check that a stage can be assembled

		Parameters:
			sun:		tooth count of the sun or None
			planets:	tooth counts of the planet chain, from the sun side to the ring side
			ring:		tooth count of the ring or None
			copies:		number of copies of the planet chain orbiting in the ring
	'''
	planets = list(planets)

	if sun is not None and ring is not None and not planets:
		return AssemblyStatus('impossible', False, Message('no_planet'))

	if ring is None:
		return AssemblyStatus('open', True, Message('open_stage'))

	# without sun, the only closure is the clearance between the ring and the planets touching it
	if sun is None:
		copies = max(1, roundhalf(copies or 1))
		if planets:
			contact = abs(planets[-1])
			if copies <= 1:
				if abs(ring) <= contact:
					return AssemblyStatus('impossible', False, Message('ring_smaller_than_planet', {'ring': ring, 'contact': contact}))
			else:
				# minimum radius of a circle tangent to `copies` equal circles inscribed in it
				s = sin(pi / copies)
				minimum = ceil(contact * (1 + 1/s))  if isfinite(s) and s > 1e-6 else  float('inf')
				if abs(ring) < minimum:
					return AssemblyStatus('impossible', False, Message('ring_too_small_for_copies', {'copies': copies, 'minimum': minimum, 'ring': ring}))
		return AssemblyStatus('open', True, Message('sunless_stage'))

	if len(planets) == 1:
		expected = sun + 2*planets[0]
		if ring != expected:
			return AssemblyStatus('impossible', False, Message('single_planet_mismatch', {'expected': expected}))
		return AssemblyStatus('straight', True, Message('single_planet_straight', {'expected': expected}))

	limit = sun + 2*sum(planets)
	if len(planets) == 2:
		if ring > limit:
			return AssemblyStatus('impossible', False, Message('two_planets_exceed', {'ring': ring, 'limit': limit}))
		if ring == limit:
			return AssemblyStatus('straight', True, Message('two_planets_at_limit', {'ring': ring, 'limit': limit}))
		return AssemblyStatus('curved', True, Message('two_planets_below_limit', {'ring': ring, 'limit': limit}))

	if ring > limit:
		return AssemblyStatus('impossible', False, Message('chain_exceeds', {'ring': ring, 'limit': limit}))
	if ring == limit:
		return AssemblyStatus('straight', True, Message('chain_at_limit', {'ring': ring, 'limit': limit}))
	return AssemblyStatus('curved', True, Message('chain_below_limit', {'ring': ring, 'limit': limit}))


@dataclass(frozen=True)
class TopologyPath:
	''' A sun to ring path through the meshes of one carrier

		Attributes:
			carrier:	velocity variable of the carrier
			path:		velocity variables from the sun to the ring
			planets:	number of planets in the path
			validation:	'ok', 'failed' or 'skipped' when no numeric check applies
			status:		'straight', 'curved' or 'impossible'
	'''
	carrier: object
	path: list
	planets: int
	validation: str
	status: str
	sun_teeth: Optional[int] = None
	planet_teeth: list = field(default_factory=list)
	ring_teeth: Optional[int] = None

@dataclass(frozen=True)
class TopologySummary:
	''' Result of `analyze_topology`

		Attributes:
			summary:	'impossible' if any path is, else 'straight' if any path is, else 'curved'
			paths:		list of `TopologyPath`
	'''
	summary: str
	paths: list


def shortest_path(conn: '{node: [node]}', start, stop) -> list:
	''' Breadth first search of the shortest path between two nodes of a graph, or None if they are not connected '''
	previous = {start: None}
	front = deque([start])
	while front:
		node = front.popleft()
		if node == stop:
			break
		for child in conn.get(node, ()):
			if child not in previous:
				previous[child] = node
				front.append(child)
	if stop not in previous:
		return None
	path = []
	node = stop
	while node is not None:
		path.append(node)
		node = previous[node]
	path.reverse()
	return path


def analyze_topology(model: Model) -> TopologySummary:
	''' Classify the carrier of every sun-ring path of the model

		This is a global check meant for display, stages are gated by `validate_stage_assembly`
	'''
	elements = {element.var: element  for element in model.elements}
	def teeth(var):
		element = elements.get(var)
		if element is None:		return None
		z = element.teeth
		return z  if isinstance(z, numbers.Real) and not isinstance(z, bool) and isfinite(z) else  None

	# group meshes by carrier
	bycarrier = {}
	for mesh in model.meshes:
		bycarrier.setdefault(mesh.carrier, []).append(mesh)

	suns = [element.var  for element in model.elements  if element.kind == 'sun']
	rings = [element.var  for element in model.elements  if element.kind == 'ring']

	paths = []
	for carrier, meshes in bycarrier.items():
		# undirected connectivity between velocity variables
		conn = {}
		for mesh in meshes:
			conn.setdefault(mesh.i, [])
			conn.setdefault(mesh.j, [])
			if mesh.j not in conn[mesh.i]:	conn[mesh.i].append(mesh.j)
			if mesh.i not in conn[mesh.j]:	conn[mesh.j].append(mesh.i)

		for s in suns:
			if s not in conn:	continue
			for a in rings:
				if a not in conn:	continue
				path = shortest_path(conn, s, a)
				if not path:	continue

				planets = [var  for var in path[1:-1]  if var in elements and elements[var].kind == 'planet']
				zs, za = teeth(path[0]), teeth(path[-1])
				zp = [teeth(var)  for var in planets]
				known = zs is not None and za is not None and all(z is not None  for z in zp)

				validation, status = 'skipped', 'curved'
				if len(planets) == 1 and known:
					if za == zs + 2*zp[0]:
						validation, status = 'ok', 'straight'
					else:
						validation, status = 'failed', 'impossible'
				elif len(planets) == 2 and known:
					if za == zs + 2*zp[0] + 2*zp[1]:
						validation, status = 'ok', 'straight'

				paths.append(TopologyPath(carrier, path, len(planets), validation, status, zs, zp, za))

	if any(path.status == 'impossible'  for path in paths):
		summary = 'impossible'
	elif any(path.status == 'straight'  for path in paths):
		summary = 'straight'
	else:
		summary = 'curved'
	logger.debug('topology: %d sun-ring paths, %s', len(paths), summary)
	return TopologySummary(summary, paths)
