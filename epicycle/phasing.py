# This file is part of epicycle,  distributed under license LGPL v3

''' Phasing of the gears of a planetary stage.

	To render a stage, every gear needs a starting orientation such that its teeth interlock with its neighbours. These phases only depend on tooth counts and on the geometry of the stage, not on the velocities.

	Copies of the planet chain
	--------------------------

	When a carrier holds several copies of its planet chain, the copies can only sit at angles where the teeth of the sun and the ring come in registration again. Going around the carrier by an angle `θ`, the sun and the ring see opposite (odd chain) or identical (even chain) tooth displacements, so the valid positions are multiples of the tick angle

	.. math::
		\\hat\\theta = \\frac{2 \\pi}{|Z_s + D |Z_a||}   \\qquad D = +1 \\text{ for odd chains, } -1 \\text{ for even chains}

	each copy is placed on the tick nearest to its ideal equally spaced position.

	Phase of the gears
	------------------

	The sun is the phase reference. Each planet rolls on the previous gear of the chain (the sun for the first one), along the direction between their centers

	.. math::
		\\varphi_k = - \\varphi_{k-1} \\frac{Z_{k-1}}{Z_k} + (\\theta + \\alpha_k) (1 + \\frac{Z_{k-1}}{Z_k}) + p_k \\frac{\\pi}{Z_k}

	with `α_k` the mesh direction and `p_k = 1` for even tooth counts (so a gap rather than a tooth tip faces the contact). The ring phase is deduced from the planet it meshes with. Without sun, the ring becomes the reference and the phases are propagated backward along the chain.
'''

import logging
from dataclasses import dataclass, field
from typing import Optional

from .mathutils import vec2, TAU, pi, mod2pi, roundhalf, rotate2, polar
from .stage import sun as sunvar, ring as ringvar, planet as planetvar
from . import settings

__all__ = ['Phasing', 'compute_phasing', 'copy_angles', 'phase_key']

logger = logging.getLogger(__name__)


@dataclass
class Phasing:
	''' Static phases of a stage

		Attributes:
			copy_angles:	angle of each copy of the planet chain around the carrier
			sun_phase:		phase of the sun, None without sun
			ring_phase:		phase of the ring, None without ring
			planet_phases:	for each planet of the chain, its phase in each copy
			gear_phases:	every phase keyed as expected by the renderer: `'{planet var}#copy{m}'` for planets, the variable name for the sun and ring
	'''
	copy_angles: list
	sun_phase: Optional[float] = None
	ring_phase: Optional[float] = None
	planet_phases: list = field(default_factory=list)
	gear_phases: dict = field(default_factory=dict)


def phase_key(var, copy=None) -> str:
	''' key of a gear in `Phasing.gear_phases` '''
	if copy is None:
		return str(var)
	return '{}#copy{}'.format(var, copy)

def clamp_copies(copies) -> int:
	return max(1, min(settings.phasing['max_copies'], roundhalf(copies or 1)))


def copy_angles(copies, sun, ring, planets) -> list:
	''' Angles of the copies of a planet chain around the carrier

		Parameters:
			copies:		number of copies, clamped to `[1, settings.phasing['max_copies']]`
			sun, ring:	tooth counts of the sun and the ring, or None
			planets:	tooth counts of the planet chain
	'''
	n = clamp_copies(copies)
	if n <= 1:
		return [0.]
	# nothing to mesh with on one side, perfect symmetry
	if sun is None or ring is None:
		return [TAU*m/n  for m in range(n)]

	direction = 1  if max(1, len(planets)) % 2 else  -1
	zeff = abs(sun + direction * abs(ring))
	# infinitely many valid positions
	if zeff == 0:
		return [TAU*m/n  for m in range(n)]

	tick = TAU / zeff
	return [mod2pi(roundhalf(TAU*m/n / tick) * tick)  for m in range(n)]


def compute_phasing(stage, sun, ring, planets, copies=1, positions=None) -> Phasing:
	''' Compute the static phases of every gear of a stage

		Parameters:
			stage:		stage id, used for the keys of `gear_phases`
			sun, ring:	tooth counts of the sun and of the ring, or None
			planets:	tooth counts of the planet chain
			copies:		number of copies of the chain around the carrier
			positions:	centers of the planets of the base chain (`vec2`), as given by `stage_layout`. When omitted a straight chain is assumed
	'''
	planets = list(planets)
	n = clamp_copies(copies)
	angles = copy_angles(n, sun, ring, planets)
	sun_phase = 0.  if sun is not None else  None

	if positions is None:
		positions = [vec2(k+1, 0)  for k in range(len(planets))]
	positions = [vec2(p)  for p in positions]
	if len(positions) < len(planets):
		raise ValueError('expected {} planet positions, got {}'.format(len(planets), len(positions)))

	# remove the global rotation of the layout, so phases only depend on its relative geometry
	normalized, betas = [], []
	if positions:
		base = polar(positions[0])
		normalized = [rotate2(p, -base)  for p in positions]
		betas = [polar(p)  for p in normalized]

	# unwrapped phases of each planet in each copy
	absolute = []
	for k, z in enumerate(planets):
		current = max(1, abs(z))
		previous = (sun or 0)  if k == 0 else  max(1, abs(planets[k-1]))
		ratio = previous / current
		origin = vec2(0)  if k == 0 else  normalized[k-1]
		mesh = polar(normalized[k] - origin)
		extra = pi/current  if current % 2 == 0 else  0.

		phases = []
		for m, theta in enumerate(angles):
			before = (sun_phase or 0.)  if k == 0 else  absolute[k-1][m]
			phases.append(-before*ratio + (theta + mesh)*(1 + ratio) + extra)
		absolute.append(phases)

	# ring phase from the planet in contact with it
	ring_phase = None
	if ring is not None and planets and abs(ring) > 0:
		za = abs(ring)
		contact = len(planets)-1
		zc = abs(planets[contact])
		ring_phase = mod2pi(absolute[contact][0] * zc/za + betas[contact] * (1 - zc/za))

	# no sun: the ring is the reference, anchor the contact planet on it and propagate backward
	if sun is None and ring_phase is not None:
		za = abs(ring)
		contact = len(planets)-1
		zc = max(1, abs(planets[contact]))
		for m, theta in enumerate(angles):
			beta = mod2pi(betas[contact] + theta)
			absolute[contact][m] = ring_phase * za/zc + beta * (1 - za/zc)

		for k in reversed(range(contact)):
			zk = max(1, abs(planets[k]))
			znext = max(1, abs(planets[k+1]))
			ratio = zk / znext
			mesh = polar(normalized[k+1] - normalized[k])
			extra = pi/znext  if znext % 2 == 0 else  0.
			for m, theta in enumerate(angles):
				# inverse of the rolling relation from planet k to planet k+1
				absolute[k][m] = ((theta + mesh)*(1 + ratio) + extra - absolute[k+1][m]) / ratio

	planet_phases = [[mod2pi(phi)  for phi in phases]  for phases in absolute]

	gear_phases = {}
	for k, phases in enumerate(planet_phases):
		for m, phi in enumerate(phases):
			gear_phases[phase_key(planetvar(stage, k+1), m)] = phi
	if sun_phase is not None:	gear_phases[phase_key(sunvar(stage))] = sun_phase
	if ring_phase is not None:	gear_phases[phase_key(ringvar(stage))] = ring_phase

	logger.debug('stage %s phased with %d copies at %s', stage, n, angles)
	return Phasing(angles, sun_phase, ring_phase, planet_phases, gear_phases)
