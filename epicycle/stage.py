# This file is part of epicycle,  distributed under license LGPL v3

''' Stage descriptions, and their conversion to kinematic models.

	A stage is the user facing grouping of a planetary train: an optional sun, a chain of planets, an optional ring, all carried by one carrier. A transmission is a list of stages coupled by `Equal` constraints.

		>>> stages = [Stage(1, sun=20, planets=[20], ring=60)]
		>>> model = build_model(stages, speeds=[(sun(1), 10)], couplings=[], ratios=[(sun(1), carrier(1))])
'''

from dataclasses import dataclass, field
from typing import Optional

from .model import Var, Element, Mesh, Known, Equal, Lock, Ratio, Model, ModelError

__all__ = ['Stage', 'build_model', 'variables', 'sun', 'ring', 'carrier', 'planet']


def sun(stage) -> Var:		return Var('sun', stage)
def ring(stage) -> Var:		return Var('ring', stage)
def carrier(stage) -> Var:	return Var('carrier', stage)
def planet(stage, k) -> Var:	return Var('planet', stage, k)


@dataclass
class Stage:
	''' Description of a planetary stage

		Attributes:
			id:			stage identifier, used in the variables of its members
			sun:		tooth count of the sun, None when there is no sun
			planets:	tooth counts of the planets, in chain order from the sun side to the ring side
			ring:		tooth count of the ring, None when there is no ring
			copies:		number of copies of the planet chain around the carrier
	'''
	id: int
	sun: Optional[int] = None
	planets: list = field(default_factory=list)
	ring: Optional[int] = None
	copies: int = 1

	def variables(self) -> list:
		''' velocity variables of the members of this stage: sun, carrier, ring, planets '''
		vars = []
		if self.sun is not None:	vars.append(sun(self.id))
		vars.append(carrier(self.id))
		if self.ring is not None:	vars.append(ring(self.id))
		vars.extend(planet(self.id, k+1)  for k in range(len(self.planets)))
		return vars

	def elements(self) -> list:
		''' elements of the stage, in the order sun, carrier, planets, ring '''
		elements = []
		if self.sun is not None:
			elements.append(Element('sun{}'.format(self.id), 'sun', self.sun, sun(self.id)))
		elements.append(Element('arm{}'.format(self.id), 'carrier', None, carrier(self.id)))
		for k, z in enumerate(self.planets):
			elements.append(Element('p{}_{}'.format(self.id, k+1), 'planet', z, planet(self.id, k+1)))
		if self.ring is not None:
			elements.append(Element('ring{}'.format(self.id), 'ring', self.ring, ring(self.id)))
		return elements

	def meshes(self) -> list:
		''' meshes of the stage chain: sun-planet (external), planet-planet (external), planet-ring (internal) '''
		b = carrier(self.id)
		n = len(self.planets)
		meshes = []
		if self.sun is not None and n >= 1:
			meshes.append(Mesh(sun(self.id), planet(self.id, 1), b, 'external'))
		for k in range(1, n):
			meshes.append(Mesh(planet(self.id, k), planet(self.id, k+1), b, 'external'))
		if self.ring is not None and n >= 1:
			meshes.append(Mesh(planet(self.id, n), ring(self.id), b, 'internal'))
		return meshes


def variables(stages) -> list:
	''' all the velocity variables of the given stages, stage after stage '''
	return [var  for stage in stages  for var in stage.variables()]


def build_model(stages, speeds=(), couplings=(), ratios=()) -> Model:
	''' Build the kinematic model of a transmission

		Parameters:
			stages:		list of `Stage`
			speeds:		known speeds, as `Known`, `Lock` or `(var, rpm)` couples
			couplings:	velocities locked together, as `Equal` or `(a, b)` couples
			ratios:		ratios to report, as `Ratio` or `(num, den)` couples, couples are given the id `'input/output'` or `'input/output{i}'` when several
	'''
	ids = [stage.id for stage in stages]
	if len(set(ids)) != len(ids):
		raise ModelError('duplicated stage ids: {}'.format(ids))

	elements, meshes = [], []
	for stage in stages:
		elements.extend(stage.elements())
		meshes.extend(stage.meshes())

	constraints = []
	for speed in speeds:
		if isinstance(speed, (Known, Lock)):
			constraints.append(speed)
		else:
			var, value = speed
			if var is not None:
				constraints.append(Known(var, value))
	for coupling in couplings:
		if isinstance(coupling, Equal):
			constraints.append(coupling)
		else:
			a, b = coupling
			if a is not None and b is not None:
				constraints.append(Equal(a, b))

	requests = []
	for i, ratio in enumerate(ratios):
		if isinstance(ratio, Ratio):
			requests.append(ratio)
		else:
			num, den = ratio
			if num is not None and den is not None:
				requests.append(Ratio('input/output' if i == 0 else 'input/output{}'.format(i), num, den))

	return Model(
		elements = elements,
		meshes = meshes,
		constraints = constraints,
		ratios = requests,
		carriers = [carrier(stage.id)  for stage in stages],
		)
