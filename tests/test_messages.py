import pytest

from epicycle.messages import Message, text, label, templates, LANGUAGES
from epicycle.assembly import validate_stage_assembly
from epicycle.stage import sun, ring, planet, carrier


def test_templates_complete():
	keys = set(templates['en'])
	for lang in LANGUAGES:
		print(lang, keys ^ set(templates[lang]))
		assert set(templates[lang]) == keys

def test_text():
	message = validate_stage_assembly(20, [10], 41).message
	assert text(message, 'en') == 'Impossible assembly: for 1 planet, it is mandatory Na = Ns + 2×Np = 40.'
	assert text(message, 'pt') == 'Montagem impossível: para 1 planeta, é obrigatório Na = Ns + 2×Np = 40.'
	assert message.text('en') == text(message, 'en')
	with pytest.raises(ValueError):
		text(message, 'xx')

def test_nested():
	message = Message('underdetermined', {'count': 2, 'what': Message('constraint_many')})
	assert text(message, 'en') == 'The kinematic system is underdetermined. Add 2 more known speeds or couplings.'
	message = Message('stage_error', {'stage': Message('stage'), 'id': 3, 'message': Message('no_planet')})
	assert text(message, 'en').startswith('Planetary 3: Impossible assembly')

def test_every_status_renders():
	for args in [(20, [10], 40), (20, [10], 41), (30, [10, 10], 60), (30, [10, 10], 70), (30, [10, 10], 80),
				(12, [6, 6, 6], 40), (12, [6, 6, 6], 48), (12, [6, 6, 6], 60), (20, [], 60), (20, [10], None),
				(None, [10], 40), (None, [10], 10), (None, [10], 20)]:
		status = validate_stage_assembly(*args, copies=1  if args[2] != 20 else  3)
		for lang in LANGUAGES:
			rendered = text(status.message, lang)
			print(args, rendered)
			assert '{' not in rendered

def test_label():
	assert label(sun(1), 'en') == 'Planetary 1 • Sun'
	assert label(planet(2, 1), 'en') == 'Planetary 2 • Planet 1'
	assert label(planet(2, 1), 'en', single_stage=True, chain=1) == 'Planet'
	assert label(ring(1), 'pt', single_stage=True) == 'Anelar'
	assert label(carrier(1), 'pt') == 'Planetária 1 • Braço'

def test_message_value():
	assert Message('no_planet').params == {}
	assert Message('single_planet_mismatch', {'expected': 40}) == Message('single_planet_mismatch', {'expected': 40})
	assert Message('no_planet') != Message('open_stage')

	params = {'expected': 40}
	message = Message('single_planet_mismatch', params)
	params['expected'] = 41
	assert message.params['expected'] == 40
	with pytest.raises(TypeError):
		message.params['expected'] = 42

	# statuses can be used as keys or in sets
	status = validate_stage_assembly(20, [10], 40)
	assert hash(status) == hash(validate_stage_assembly(20, [10], 40))
	nested = Message('stage_error', {'stage': Message('stage'), 'id': 1, 'message': status.message})
	assert len({nested, Message('stage_error', {'stage': Message('stage'), 'id': 1, 'message': status.message})}) == 1
