from epicycle import *

zring = 60
zplanet = 20
zsun = zring - 2*zplanet

setup_logging()

stages = [Stage(1, sun=zsun, planets=[zplanet], ring=zring, copies=3)]
result = evaluate(stages,
	speeds = [(sun(1), 1500), (ring(1), 0)],
	ratios = [(sun(1), carrier(1))],
	)

print(text(result.assembly[1].message))
if result.valid:
	for var, velocity in result.solution.velocities.items():
		print('{:<24} {:>10.3f} rpm'.format(label(var, single_stage=True, chain=1), velocity))
	print('reduction ratio', result.solution.ratios['input/output'])
else:
	for error in result.errors():
		print(text(error))

phasing = result.phasing[1]
for key, phase in phasing.gear_phases.items():
	print('{:<20} {:.4f} rad'.format(key, phase))
