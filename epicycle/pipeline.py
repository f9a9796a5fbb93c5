# This file is part of epicycle,  distributed under license LGPL v3

''' Complete evaluation of a transmission.

	This chains the library operations the way an interactive application needs them after every edit:

		stages  →  assembly status  →  model  →  velocities  →  layouts  →  phases

	`evaluate` has no state: it returns a new `Evaluation` each time, so the application simply calls it again whenever its inputs change.

		>>> result = evaluate([Stage(1, sun=20, planets=[20], ring=60, copies=3)], speeds=[(sun(1), 10), (ring(1), 0)])
		>>> result.solution.velocities[carrier(1)]
		2.5
		>>> len(result.phasing[1].copy_angles)
		3
'''

import logging
from dataclasses import dataclass, field

from .model import Model
from .stage import build_model
from .assembly import validate_stage_assembly, analyze_topology, TopologySummary
from .solver import solve
from .layout import stage_layout
from .phasing import compute_phasing
from .messages import Message

__all__ = ['Evaluation', 'evaluate']

logger = logging.getLogger(__name__)


@dataclass
class Evaluation:
	''' Everything known about a transmission

		Attributes:
			assembly:	`{stage id: AssemblyStatus}`
			model:		the kinematic model built from the stages
			topology:	the `TopologySummary` of the model
			solution:	result of `solve`, None when a stage cannot be assembled
			layouts:	`{stage id: StageLayout}`
			phasing:	`{stage id: Phasing}`
	'''
	assembly: dict
	model: Model
	topology: TopologySummary
	solution: object = None
	layouts: dict = field(default_factory=dict)
	phasing: dict = field(default_factory=dict)

	@property
	def valid(self) -> bool:
		''' True when all stages can be assembled and the velocities are determined '''
		return self.solution is not None and not self.solution.underdetermined and not self.solution.overdetermined

	def errors(self) -> list:
		''' messages to show to the user: impossible stages, or else under/over determination '''
		errors = [Message('stage_error', {'stage': Message('stage'), 'id': id, 'message': status.message})
					for id, status in self.assembly.items()  if not status.valid]
		if not errors and self.solution is not None and self.solution.message:
			errors.append(self.solution.message)
		return errors


def evaluate(stages, speeds=(), couplings=(), ratios=()) -> Evaluation:
	''' Validate, solve and phase a transmission

		Arguments are the same as for `build_model`. The velocities are not solved when a stage cannot be assembled, since an infeasible stage describes no mechanism.
	'''
	assembly = {}
	for stage in stages:
		status = validate_stage_assembly(stage.sun, stage.planets, stage.ring, stage.copies)
		assembly[stage.id] = status
		if not status.valid:
			logger.warning('stage %s cannot be assembled: %s', stage.id, status.message.key)

	model = build_model(stages, speeds, couplings, ratios)
	topology = analyze_topology(model)

	solution = None
	if all(status.valid  for status in assembly.values()):
		solution = solve(model)

	layouts, phasing = {}, {}
	for stage in stages:
		layout = stage_layout(stage)
		layouts[stage.id] = layout
		# a ring too small for the planets must not force the phasing of its contact
		phasing[stage.id] = compute_phasing(
			stage.id,
			stage.sun,
			stage.ring  if layout.ring_usable else  None,
			stage.planets,
			stage.copies,
			layout.positions,
			)

	return Evaluation(assembly, model, topology, solution, layouts, phasing)
