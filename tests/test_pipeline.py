import logging
from pytest import approx

from epicycle import *
from epicycle.mathutils import TAU


def test_simple():
	result = evaluate([Stage(1, sun=20, planets=[20], ring=60, copies=3)],
		speeds = [(sun(1), 10), (ring(1), 0)],
		ratios = [(sun(1), carrier(1))],
		)
	print(result)
	assert result.valid
	assert result.errors() == []
	assert result.assembly[1].kind == 'straight'
	assert result.topology.summary == 'straight'
	assert result.solution.velocities[carrier(1)] == approx(2.5)
	assert result.solution.ratios['input/output'] == approx(4)
	assert result.layouts[1].ring_usable
	assert len(result.phasing[1].copy_angles) == 3
	assert 'omega_p1_1#copy2' in result.phasing[1].gear_phases

def test_compound():
	result = evaluate(
		[Stage(1, sun=20, planets=[20], ring=60, copies=3), Stage(2, sun=30, planets=[10, 10], ring=60, copies=3)],
		speeds = [(sun(1), 10), (ring(1), 0), (ring(2), 0)],
		couplings = [(carrier(1), sun(2))],
		ratios = [(sun(1), carrier(2))],
		)
	assert result.valid
	assert result.assembly[2].kind == 'curved'
	assert result.layouts[2].arm == 'curved'
	# even chain with a locked ring: ωb = ωs / (1 - Na/Ns)
	assert result.solution.velocities[carrier(2)] == approx(2.5 / (1 - 60/30))
	assert len(result.phasing[2].planet_phases) == 2

def test_impossible_stage(caplog):
	with caplog.at_level(logging.WARNING, logger='epicycle'):
		result = evaluate([Stage(1, sun=20, planets=[10], ring=41)], speeds=[(sun(1), 10), (ring(1), 0)])
	assert not result.valid
	assert result.solution is None
	assert result.topology.summary == 'impossible'
	errors = result.errors()
	assert len(errors) == 1
	assert text(errors[0], 'en') == 'Planetary 1: Impossible assembly: for 1 planet, it is mandatory Na = Ns + 2×Np = 40.'
	assert any('cannot be assembled' in record.getMessage()  for record in caplog.records)
	# still drawable
	assert 1 in result.phasing

def test_underdetermined():
	result = evaluate([Stage(1, sun=20, planets=[20], ring=60)], speeds=[(sun(1), 10)])
	assert not result.valid
	assert result.solution.underdetermined
	errors = result.errors()
	assert [error.key for error in errors] == ['underdetermined']
	assert text(errors[0], 'en') == 'The kinematic system is underdetermined. Add 1 more known speed or coupling.'

def test_small_ring_not_phased():
	# ring not larger than the planets, its phase is not computed
	result = evaluate([Stage(1, planets=[20], ring=20)], speeds=[(carrier(1), 1)])
	assert not result.assembly[1].valid
	assert not result.layouts[1].ring_usable
	assert result.phasing[1].ring_phase is None

def test_phases_range():
	result = evaluate([Stage(1, sun=13, planets=[7, 5, 6], ring=47, copies=4)], speeds=[(sun(1), 1), (ring(1), 0)])
	assert result.valid
	phases = result.phasing[1].gear_phases
	assert len(phases) == 2 + 3*4
	assert all(0 <= phase < TAU  for phase in phases.values())
