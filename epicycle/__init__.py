# This file is part of epicycle,  distributed under license LGPL v3

'''     epicycle
		kinematics of planetary gear trains

Library to compute the velocities, the assemblability and the static phasing of planetary (epicyclic) gear trains.

main concepts
-------------

A transmission is described by a list of stages. Each stage is a sun, a chain of planets and a ring, all mounted on one carrier. Any of the sun or the ring may be omitted, and the chain can be repeated several times around the carrier.

	- the description is plain data
		stages, known speeds and couplings are values, nothing is stored in the library between two evaluations. To update a transmission, just evaluate it again.

	- every step is available separately
		the assembly check, the model building, the velocity solving, the layout and the phasing are distinct functions, `evaluate` only chains them.

	- no text is produced by the computations
		statuses and errors are `Message` keys with parameters, rendered by the `messages` module in the language wanted.

data types
----------

* Stage		description of one stage: tooth counts and number of copies
* Var		velocity variable of a stage member, eg. `Var('carrier', 1)`
* Model		elements, meshes, constraints and ratio requests of a transmission
* Solution, Underdetermined, Overdetermined		results of the velocity solver
* AssemblyStatus	assemblability of a stage
* StageLayout	base 2D positions of the planets of a stage
* Phasing	static phases of every gear of a stage

Example
-------

	>>> from epicycle import *
	>>> stages = [Stage(1, sun=20, planets=[20], ring=60, copies=3)]
	>>> result = evaluate(stages, speeds=[(sun(1), 10), (ring(1), 0)], ratios=[(sun(1), carrier(1))])
	>>> result.solution.ratios['input/output']
	4.0
'''

version = '0.3.1'

from .mathutils import vec2, mod2pi, roundhalf
from .model import Var, Element, Mesh, Known, Equal, Lock, Ratio, Model, ModelError
from .stage import Stage, build_model, sun, ring, carrier, planet
from .solver import solve, Solution, Underdetermined, Overdetermined
from .assembly import validate_stage_assembly, analyze_topology, AssemblyStatus, TopologyPath, TopologySummary
from .layout import stage_layout, StageLayout
from .phasing import compute_phasing, copy_angles, Phasing
from .messages import Message, text, label
from .pipeline import evaluate, Evaluation
from .io import read, write, FileFormatError
from .log import setup_logging
from . import settings
