'''
	two stages gearbox: the carrier of the first stage drives the sun of the second, both rings are fixed to the housing
	the second stage uses a chain of two planets, so its carrier turns backward
'''
from epicycle import *
from epicycle.io import write

stages = [
	Stage(1, sun=20, planets=[20], ring=60, copies=3),
	Stage(2, sun=30, planets=[10, 10], ring=60, copies=3),
	]
speeds = [(sun(1), 1000), Lock(ring(1)), Lock(ring(2))]
couplings = [(carrier(1), sun(2))]
ratios = [(sun(1), carrier(2))]

result = evaluate(stages, speeds, couplings, ratios)

for id, status in result.assembly.items():
	print(id, status.kind, '-', text(status.message))
print('topology', result.topology.summary)

if not result.valid:
	for error in result.errors():
		print(text(error))
else:
	for var, velocity in result.solution.velocities.items():
		print('{:<28} {:>10.3f} rpm'.format(label(var), velocity))
	print('overall ratio', result.solution.ratios['input/output'])

	for id, layout in result.layouts.items():
		print('stage', id, layout.arm, 'arm, planets at', [tuple(p) for p in layout.positions])

write(dict(stages=stages, speeds=speeds, couplings=couplings, ratios=ratios), 'compound-planetary.yaml')
