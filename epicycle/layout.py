# This file is part of epicycle,  distributed under license LGPL v3

''' Base 2D layout of a planetary stage.

	The sun is centered on the origin and the first planet is placed on the positive x axis. The rest of the chain depends on what closes it:

	- no usable ring: the planets are aligned along x (straight arm)
	- a ring and two planets: the second planet is moved on the circle where it meshes with the ring (curved arm), by the law of cosines
	- a ring and three planets or more: every link of the chain turns by the same angle, found by bisection so the last planet meshes with the ring
	- a ring but no sun: the chain hangs radially from the ring contact

	Radii are pitch radii: `module * z / 2`.

	The phasing engine uses these centers to know the direction of every mesh, the renderer uses them to place the gears.
'''

import logging
from dataclasses import dataclass, field
from typing import Optional

from .mathutils import vec2, length, acos, cos, sin, fbisect, rotate2, polar
from .stage import Stage
from . import settings

__all__ = ['StageLayout', 'stage_layout', 'pitch_radius', 'curved_pair', 'bend_chain']

logger = logging.getLogger(__name__)


@dataclass
class StageLayout:
	''' Geometry of one copy of a stage

		Attributes:
			stage:			stage id
			sun_radius:		pitch radius of the sun or None
			ring_radius:	pitch radius of the ring or None
			planet_radii:	pitch radii of the planets in chain order
			positions:		centers of the planets, as `vec2`
			ring_usable:	whether the ring is large enough to constrain the planets
			arm:			'straight', 'curved' or 'radial'
	'''
	stage: int
	sun_radius: Optional[float]
	ring_radius: Optional[float]
	planet_radii: list
	positions: list = field(default_factory=list)
	ring_usable: bool = False
	arm: str = 'straight'

	def copies(self, angles) -> list:
		''' planet centers of every copy of the chain, rotated by the given copy angles '''
		return [[rotate2(p, angle)  for p in self.positions]  for angle in angles]


def pitch_radius(z, module=None) -> float:
	if module is None:	module = settings.layout['module']
	return module * abs(z) / 2

def curved_pair(first: float, r1: float, r2: float, orbit: float) -> vec2:
	''' Center of the second planet of a curved arm

		Parameters:
			first:	distance of the first planet center to the axis, it lies on the x axis
			r1, r2:	pitch radii of the two planets
			orbit:	distance to the axis the second planet center must have to mesh with the ring
	'''
	denom = 2*first*orbit
	c = (first**2 + orbit**2 - (r1+r2)**2) / (denom if denom != 0 else 1e-9)
	theta = acos(max(-1., min(1., c)))
	return vec2(orbit*cos(theta), orbit*sin(theta))

def bend_chain(first: float, radii: list, target: float, steps=None, max_bend=None) -> list:
	''' Centers of a chain of planets bending by a constant angle at each link so that the last center is at distance `target` from the axis

		The bend angle is searched by bisection in `[0, max_bend]`, the last center distance is assumed to decrease with the bend angle. When the target cannot be reached the closest chain found is returned and a warning is logged.

		Parameters:
			first:	distance of the first planet center to the axis, it lies on the x axis
			radii:	pitch radii of the planets of the chain
			target:	expected distance of the last planet center to the axis
	'''
	if steps is None:		steps = settings.layout['bisection_steps']
	if max_bend is None:	max_bend = settings.layout['max_bend']

	def chain(alpha):
		points = [vec2(first, 0)]
		direction = vec2(1, 0)
		for k in range(1, len(radii)):
			direction = rotate2(direction, alpha)
			points.append(points[-1] + direction * (radii[k-1] + radii[k]))
		return points

	alpha = fbisect(lambda alpha: length(chain(alpha)[-1]) > target, 0., max_bend, steps=steps)
	points = chain(alpha)
	miss = abs(length(points[-1]) - target)
	if miss > settings.layout['tolerance'] * max(1, target):
		logger.warning('bent chain misses the ring by %g (bend angle %g), this configuration is not reachable', miss, alpha)
	return points


def stage_layout(stage: Stage, module=None) -> StageLayout:
	''' Compute the base layout of a stage '''
	rs = pitch_radius(stage.sun, module)  if stage.sun is not None else  None
	ra = pitch_radius(stage.ring, module)  if stage.ring is not None else  None
	radii = [pitch_radius(z, module)  for z in stage.planets]
	layout = StageLayout(stage.id, rs, ra, radii)
	if not radii:
		return layout

	layout.ring_usable = usable = ra is not None and ra > radii[0] * settings.layout['ring_clearance']
	gap = max(settings.layout['min_gap'], radii[0] * 0.1)
	positions = layout.positions

	# no sun: hang the chain radially from the ring contact
	if rs is None and usable and len(radii) >= 2:
		x = max(gap, ra - radii[-1])
		radial = [x]
		for k in reversed(range(len(radii)-1)):
			x = max(gap, x - radii[k] - radii[k+1])
			radial.append(x)
		positions.extend(vec2(x, 0)  for x in reversed(radial))
		layout.arm = 'radial'
		return layout

	if rs is not None:		first = rs + radii[0]
	elif usable:			first = max(gap, ra - radii[0])
	else:					first = max(gap, radii[0])
	positions.append(vec2(first, 0))

	if usable and len(radii) == 2:
		positions.append(curved_pair(first, radii[0], radii[1], ra - radii[1]))
		layout.arm = 'straight'  if abs(positions[1].y) < settings.layout['tolerance'] else  'curved'
	elif usable and len(radii) >= 3:
		positions[:] = bend_chain(first, radii, ra - radii[-1])
		layout.arm = 'straight'  if abs(polar(positions[-1])) < settings.layout['tolerance'] else  'curved'
	else:
		for k in range(1, len(radii)):
			positions.append(positions[-1] + vec2(radii[k-1] + radii[k], 0))
	return layout
