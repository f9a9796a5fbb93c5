# This file is part of epicycle,  distributed under license LGPL v3

''' Structured messages and their localization.

	The computational modules never produce text: they return a `Message` made of a key and parameters. This module renders such messages in the languages available, for the applications displaying them.

		>>> status = validate_stage_assembly(20, [10], 41)
		>>> status.message
		Message(key='single_planet_mismatch', params={'expected': 40})
		>>> text(status.message, 'en')
		'Impossible assembly: for 1 planet, it is mandatory Na = Ns + 2×Np = 40.'
'''

from dataclasses import dataclass
from types import MappingProxyType

from . import settings

__all__ = ['Message', 'text', 'label', 'LANGUAGES']


@dataclass(frozen=True, eq=False)
class Message:
	''' localizable message: a key in the templates and the parameters to format it with

		`params` is stored as a read-only mapping, so messages are immutable and hashable as long as their parameter values are.
	'''
	key: str
	params: MappingProxyType = None

	def __post_init__(self):
		object.__setattr__(self, 'params', MappingProxyType(dict(self.params or {})))

	def __eq__(self, other):
		if not isinstance(other, Message):
			return NotImplemented
		return self.key == other.key and dict(self.params) == dict(other.params)

	def __hash__(self):
		return hash((self.key, tuple(sorted(self.params.items()))))

	def __repr__(self):
		return 'Message(key={!r}, params={!r})'.format(self.key, dict(self.params))

	def text(self, lang=None) -> str:
		return text(self, lang)


templates = {
	'en': {
		# assembly
		'no_planet': 'Impossible assembly: at least one planet gear is required between sun and ring gears.',
		'open_stage': 'No ring gear (open stage).',
		'sunless_stage': 'No sun gear (stage open for couplings).',
		'ring_smaller_than_planet': 'Impossible assembly: ring ({ring}) must be larger than the contact planet ({contact}).',
		'ring_too_small_for_copies': 'Impossible assembly: with {copies} orbiting planets, the ring needs at least {minimum} teeth (current: {ring}).',
		'single_planet_mismatch': 'Impossible assembly: for 1 planet, it is mandatory Na = Ns + 2×Np = {expected}.',
		'single_planet_straight': 'Straight carrier: Na = Ns + 2×Np = {expected}.',
		'two_planets_exceed': 'Impossible assembly: Na = {ring} exceeds the limit Ns + 2×(Np1+Np2) = {limit}.',
		'two_planets_at_limit': 'Na = {ring} (meets the limit Ns + 2×(Np1+Np2) = {limit}).',
		'two_planets_below_limit': 'Na = {ring} (below the limit Ns + 2×(Np1+Np2) = {limit}).',
		'chain_exceeds': 'Impossible assembly: Na = {ring} exceeds the limit Ns + 2×∑Np = {limit}.',
		'chain_at_limit': 'Straight carrier: Na = {ring}, limit Ns + 2×∑Np = {limit}.',
		'chain_below_limit': 'Stepped carrier: Na = {ring}, limit Ns + 2×∑Np = {limit}.',
		# solver
		'underdetermined': 'The kinematic system is underdetermined. Add {count} more known {what}.',
		'overdetermined': 'The kinematic system is overdetermined. Remove {count} {what}.',
		'constraint_one': 'speed or coupling',
		'constraint_many': 'speeds or couplings',
		'known_constraint_one': 'known speed or coupling',
		'known_constraint_many': 'known speeds or couplings',
		# stage status
		'kind_open': 'Open stage (no ring gear)',
		'kind_straight': 'Straight carrier',
		'kind_curved': 'Stepped carrier',
		'kind_impossible': 'Impossible assembly',
		'stage_error': '{stage} {id}: {message}',
		# labels
		'stage': 'Planetary',
		'sun': 'Sun',
		'planet': 'Planet',
		'ring': 'Ring',
		'carrier': 'Carrier',
		},
	'pt': {
		'no_planet': 'Montagem impossível: é necessário pelo menos uma engrenagem planeta entre engrenagens Solar e Anelar.',
		'open_stage': 'Sem engrenagem anelar (estágio aberto).',
		'sunless_stage': 'Sem solar (estágio aberto para acoplamentos).',
		'ring_smaller_than_planet': 'Montagem impossível: anelar ({ring}) deve ser maior que o planeta de contato ({contact}).',
		'ring_too_small_for_copies': 'Montagem impossível: para {copies} planetas em órbita, o anelar precisa de pelo menos {minimum} dentes (atual: {ring}).',
		'single_planet_mismatch': 'Montagem impossível: para 1 planeta, é obrigatório Na = Ns + 2×Np = {expected}.',
		'single_planet_straight': 'Braço reto: Na = Ns + 2×Np = {expected}.',
		'two_planets_exceed': 'Montagem impossível: Na = {ring} maior que o limite Ns + 2×(Np1+Np2) = {limit}.',
		'two_planets_at_limit': 'Na = {ring} (atinge o limite Ns + 2×(Np1+Np2) = {limit}).',
		'two_planets_below_limit': 'Na = {ring} (abaixo do limite Ns + 2×(Np1+Np2) = {limit}).',
		'chain_exceeds': 'Montagem impossível: Na = {ring} maior que o limite Ns + 2×∑Np = {limit}.',
		'chain_at_limit': 'Braço reto: Na = {ring}, limite Ns + 2×∑Np = {limit}.',
		'chain_below_limit': 'Braço curvo: Na = {ring}, limite Ns + 2×∑Np = {limit}.',
		'underdetermined': 'O sistema cinemático está subdeterminado. Adicione mais {count} {what}.',
		'overdetermined': 'O sistema cinemático está superdeterminado. Retire {count} {what}.',
		'constraint_one': 'velocidade conhecida ou acoplamento',
		'constraint_many': 'velocidades conhecidas ou acoplamentos',
		'known_constraint_one': 'velocidade conhecida ou acoplamento',
		'known_constraint_many': 'velocidades conhecidas ou acoplamentos',
		'kind_open': 'Estágio aberto (sem engrenagem anelar)',
		'kind_straight': 'Braço reto',
		'kind_curved': 'Braço curvo',
		'kind_impossible': 'Montagem impossível',
		'stage_error': '{stage} {id}: {message}',
		'stage': 'Planetária',
		'sun': 'Solar',
		'planet': 'Planeta',
		'ring': 'Anelar',
		'carrier': 'Braço',
		},
	}
LANGUAGES = tuple(templates)


def text(message: Message, lang=None) -> str:
	''' Render a message in the given language, or in `settings.messages['language']`

		Message parameters that are messages themselves are rendered recursively.
	'''
	if lang is None:	lang = settings.messages['language']
	if lang not in templates:
		raise ValueError('unknown language: {}'.format(repr(lang)))
	params = {key: text(value, lang) if isinstance(value, Message) else value
				for key, value in message.params.items()}
	return templates[lang][message.key].format(**params)

def label(var, lang=None, single_stage=False, chain=2) -> str:
	''' Human readable name of a stage velocity variable

		Parameters:
			var:			a `Var`
			single_stage:	when True, the stage is not mentionned
			chain:			number of planets in the stage of `var`, planets are numbered only in chains of 2 or more
	'''
	if lang is None:	lang = settings.messages['language']
	names = templates[lang]
	name = names[var.role]
	if var.role == 'planet' and chain > 1:
		name = '{} {}'.format(name, var.planet)
	if single_stage:
		return name
	return '{} {} • {}'.format(names['stage'], var.stage, name)
