import pytest

from epicycle.model import *
from epicycle.stage import Stage, build_model, variables, sun, ring, carrier, planet


def test_var_names():
	assert str(sun(1)) == 'omega_s1'
	assert str(ring(2)) == 'omega_a2'
	assert str(carrier(3)) == 'omega_b3'
	assert str(planet(1, 2)) == 'omega_p1_2'
	assert planet(1, 2) == Var('planet', 1, 2)
	assert sun(1) != ring(1)

def test_mesh_factor():
	assert Mesh('a', 'b', 'c').factor == 1
	assert Mesh('a', 'b', 'c', 'internal').factor == -1
	assert Mesh('a', 'b', 'c', None, -1).factor == -1
	# sign has priority
	assert Mesh('a', 'b', 'c', 'internal', 1).factor == 1
	with pytest.raises(ModelError):
		Mesh('a', 'b', 'c', 'helical').factor

def test_model_access():
	s, p, b = Var('sun', 1), Var('planet', 1, 1), Var('carrier', 1)
	model = Model(
		elements=[
			Element('sun1', 'sun', 20, s),
			Element('p1_1', 'planet', 20, p),
			Element('arm1', 'carrier', None, b),
			],
		constraints=[Known(s, 10), Equal(s, 'other')],
		)
	assert model.element(p).id == 'p1_1'
	assert model.teeth(s) == 20
	with pytest.raises(ModelError):
		model.teeth(b)
	with pytest.raises(ModelError):
		model.element(Var('ring', 1))
	assert model.variables() == [s, p, b, 'other']

def test_constraints():
	assert Lock('x').value == 0
	assert Lock('x').variables() == ('x',)
	assert Equal('x', 'y').variables() == ('x', 'y')
	assert Known('x', 3).variables() == ('x',)


def test_stage():
	stage = Stage(1, sun=20, planets=[10, 12], ring=60)
	assert stage.variables() == [sun(1), carrier(1), ring(1), planet(1,1), planet(1,2)]
	assert [e.id for e in stage.elements()] == ['sun1', 'arm1', 'p1_1', 'p1_2', 'ring1']
	meshes = stage.meshes()
	assert [(m.i, m.j, m.kind) for m in meshes] == [
		(sun(1), planet(1,1), 'external'),
		(planet(1,1), planet(1,2), 'external'),
		(planet(1,2), ring(1), 'internal'),
		]
	assert all(m.carrier == carrier(1)  for m in meshes)

def test_partial_stages():
	# no ring
	stage = Stage(2, sun=20, planets=[10])
	assert len(stage.meshes()) == 1
	assert ring(2) not in stage.variables()
	# no sun
	stage = Stage(3, planets=[10], ring=40)
	assert [(m.i, m.j) for m in stage.meshes()] == [(planet(3,1), ring(3))]
	# no planet
	assert Stage(4, sun=20, ring=60).meshes() == []
	assert variables([Stage(1), Stage(2, sun=10)]) == [carrier(1), sun(2), carrier(2)]

def test_build_model():
	stages = [Stage(1, sun=20, planets=[20], ring=60), Stage(2, sun=20, planets=[20], ring=60)]
	model = build_model(stages,
		speeds = [(sun(1), 10), Lock(ring(1)), (None, 3)],
		couplings = [(carrier(1), sun(2)), (None, sun(2))],
		ratios = [(sun(1), carrier(2)), (sun(1), carrier(1)), Ratio('custom', sun(2), carrier(2))],
		)
	print(model)
	assert len(model.elements) == 8
	assert len(model.meshes) == 4
	assert model.constraints == [Known(sun(1), 10), Lock(ring(1)), Equal(carrier(1), sun(2))]
	assert [r.id for r in model.ratios] == ['input/output', 'input/output1', 'custom']
	assert model.carriers == [carrier(1), carrier(2)]

def test_duplicate_stages():
	with pytest.raises(ModelError):
		build_model([Stage(1, sun=10), Stage(1, sun=12)])
