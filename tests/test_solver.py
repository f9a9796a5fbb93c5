from math import isnan
import numpy as np
import pytest
from pytest import approx

from epicycle.model import *
from epicycle.stage import Stage, build_model, sun, ring, carrier, planet
from epicycle.solver import solve, equations, Solution, Underdetermined, Overdetermined
from epicycle.pipeline import evaluate


simple = [Stage(1, sun=20, planets=[20], ring=60)]

def test_simple_planetary():
	result = solve(build_model(simple, speeds=[(sun(1), 10), (ring(1), 0)], ratios=[(sun(1), carrier(1))]))
	print(result)
	assert isinstance(result, Solution)
	assert not result.underdetermined and not result.overdetermined
	assert result.velocities[carrier(1)] == approx(2.5)
	assert result.velocities[planet(1,1)] == approx(-5)
	assert result.velocities[ring(1)] == approx(0, abs=1e-9)
	assert result.ratios['input/output'] == approx(4)
	assert result.message is None

def test_mesh_equations_hold():
	model = build_model([Stage(1, sun=17, planets=[13, 11], ring=48)], speeds=[(sun(1), 7), (carrier(1), -3)])
	result = solve(model)
	assert isinstance(result, Solution)
	v = result.velocities
	for mesh in model.meshes:
		residual = (model.teeth(mesh.i) * (v[mesh.i] - v[mesh.carrier])
				+ mesh.factor * model.teeth(mesh.j) * (v[mesh.j] - v[mesh.carrier]))
		assert residual == approx(0, abs=1e-9)
	assert v[sun(1)] == approx(7)
	assert v[carrier(1)] == approx(-3)

def test_compound():
	stages = [Stage(1, sun=20, planets=[20], ring=60), Stage(2, sun=20, planets=[20], ring=60)]
	result = solve(build_model(stages,
		speeds = [(sun(1), 10), (ring(1), 0), (ring(2), 0)],
		couplings = [(carrier(1), sun(2))],
		ratios = [(sun(1), carrier(2))],
		))
	assert result.velocities[carrier(2)] == approx(0.625)
	assert result.ratios['input/output'] == approx(16)

def test_underdetermined():
	missing = []
	for speeds in [[(sun(1), 10), (ring(1), 0)], [(sun(1), 10)], []]:
		result = solve(build_model(simple, speeds=speeds))
		print(speeds, result)
		missing.append(0  if not result.underdetermined else  result.missing)
	assert missing == [0, 1, 2]

	result = solve(build_model(simple, speeds=[(sun(1), 10)]))
	assert isinstance(result, Underdetermined)
	assert sun(1) not in result.undetermined
	assert carrier(1) in result.undetermined
	assert ring(1) in result.undetermined
	assert result.message.key == 'underdetermined'
	assert result.message.params['count'] == 1
	assert result.message.params['what'].key == 'constraint_one'

def test_underdetermined_compound():
	stages = [Stage(1, sun=20, planets=[20], ring=60), Stage(2, sun=24, planets=[12, 18], ring=84)]
	constraints = [(sun(1), 10), (ring(1), 0), (carrier(1), sun(2)), (ring(2), 0)]
	missing = []
	for i in range(len(constraints)+1):
		speeds = [c  for c in constraints[:i]  if not isinstance(c[1], Var)]
		couplings = [c  for c in constraints[:i]  if isinstance(c[1], Var)]
		result = solve(build_model(stages, speeds=speeds, couplings=couplings))
		print(i, result)
		if result.underdetermined:
			missing.append(result.missing)
		else:
			missing.append(0)
			assert isinstance(result, Solution)
	assert missing[0] >= 1
	assert missing == sorted(missing, reverse=True)
	assert missing[-1] == 0

def test_round_trip():
	stages = [Stage(1, sun=20, planets=[20], ring=60), Stage(2, sun=24, planets=[12, 18], ring=84)]
	model = build_model(stages, speeds=[(sun(1), 10), (ring(1), 0), (ring(2), 3)], couplings=[(carrier(1), sun(2))])
	first = solve(model)
	assert isinstance(first, Solution)
	again = solve(build_model(stages,
		speeds = [(sun(1), 10), (ring(1), 0), (ring(2), 3)] + list(first.velocities.items()),
		couplings = [(carrier(1), sun(2))],
		))
	assert isinstance(again, Solution)
	for var, velocity in first.velocities.items():
		assert again.velocities[var] == approx(velocity, abs=1e-9)

def test_conflicting_knowns():
	result = solve(build_model(simple, speeds=[(sun(1), 10), (sun(1), 12), (ring(1), 0)]))
	assert isinstance(result, Overdetermined)
	assert result.conflicting >= 1

def test_overdetermined():
	result = solve(build_model(simple, speeds=[(sun(1), 10), (ring(1), 0), (carrier(1), 0)]))
	assert isinstance(result, Overdetermined)
	assert result.overdetermined
	assert result.conflicting >= 1
	assert result.message.key == 'overdetermined'

def test_redundant_consistent():
	result = solve(build_model(simple, speeds=[(sun(1), 10), (ring(1), 0), (carrier(1), 2.5)]))
	assert isinstance(result, Solution)
	assert result.velocities[planet(1,1)] == approx(-5)

def test_null_ratio():
	model = Model(
		constraints = [Known('input', 1), Lock('output')],
		ratios = [Ratio('input/output', 'input', 'output'), Ratio('output/input', 'output', 'input')],
		)
	result = solve(model)
	assert isinstance(result, Solution)
	assert isnan(result.ratios['input/output'])
	assert result.ratios['output/input'] == approx(0)

def test_empty():
	result = solve(Model())
	assert isinstance(result, Solution)
	assert result.velocities == {}

def test_string_variables():
	model = Model(
		elements = [Element('s', 'sun', 30, 'ws'), Element('p', 'planet', 15, 'wp'), Element('r', 'ring', 60, 'wr')],
		meshes = [Mesh('ws', 'wp', 'wc'), Mesh('wp', 'wr', 'wc', 'internal')],
		constraints = [Known('ws', 6), Lock('wr')],
		carriers = ['wc'],
		)
	result = solve(model)
	# ws/wc = 1 + Nr/Ns
	assert result.velocities['wc'] == approx(2)
	tags = [equation.tag for equation in result.equations]
	assert tags[0] == 'mesh(ws,wp|wc)'
	assert 'lock(wr)' in tags

def test_structural_errors():
	s, p = Var('sun', 1), Var('planet', 1, 1)
	# mesh on a missing element
	model = Model(elements=[Element('sun1', 'sun', 20, s)], meshes=[Mesh(s, p, carrier(1))], carriers=[carrier(1)])
	with pytest.raises(ModelError):
		solve(model)
	# carrier not declared
	model = Model(elements=[Element('sun1', 'sun', 20, s), Element('p1', 'planet', 10, p)], meshes=[Mesh(s, p, carrier(1))])
	with pytest.raises(ModelError):
		solve(model)
	# ratio on a missing variable
	model = build_model(simple, speeds=[(sun(1), 10), (ring(1), 0)], ratios=[(sun(1), carrier(5))])
	with pytest.raises(ModelError):
		solve(model)

def test_whole_number_teeth():
	model = Model(
		elements = [Element('s', 'sun', np.int64(30), 'ws'), Element('p', 'planet', 15.0, 'wp'), Element('r', 'ring', np.float64(60), 'wr')],
		meshes = [Mesh('ws', 'wp', 'wc'), Mesh('wp', 'wr', 'wc', 'internal')],
		constraints = [Known('ws', 6), Lock('wr')],
		carriers = ['wc'],
		)
	assert model.teeth('ws') == 30 and type(model.teeth('ws')) is int
	assert model.teeth('wp') == 15 and type(model.teeth('wp')) is int
	assert solve(model).velocities['wc'] == approx(2)

	# stages given with float tooth counts solve like integer ones
	result = evaluate([Stage(1, sun=20.0, planets=[20.0], ring=60.0)], speeds=[(sun(1), 10), (ring(1), 0)])
	assert result.assembly[1].kind == 'straight'
	assert result.solution.velocities[carrier(1)] == approx(2.5)

def test_invalid_teeth():
	for teeth in [20.5, 0, -12, float('nan'), True, '20']:
		model = Model(
			elements = [Element('s', 'sun', teeth, 'ws'), Element('p', 'planet', 10, 'wp')],
			meshes = [Mesh('ws', 'wp', 'wc')],
			carriers = ['wc'],
			)
		with pytest.raises(ModelError):
			solve(model)
	model = Model(elements=[Element('s', 'sun', 20.5, 'ws')])
	with pytest.raises(ModelError, match='must be a positive integer, got 20.5'):
		model.teeth('ws')

def test_equations():
	model = build_model(simple, speeds=[(sun(1), 10)], couplings=[(ring(1), carrier(1))])
	variables = model.variables()
	index = {var: i  for i, var in enumerate(variables)}
	rows = equations(model, index)
	assert len(rows) == 4
	mesh = rows[1]
	# planet-ring, internal: 20 (ωp - ωb) - 60 (ωa - ωb)
	assert mesh.coefs[index[planet(1,1)]] == 20
	assert mesh.coefs[index[ring(1)]] == -60
	assert mesh.coefs[index[carrier(1)]] == 40
	assert rows[2].value == 10
	assert rows[3].coefs[index[ring(1)]] == 1 and rows[3].coefs[index[carrier(1)]] == -1
