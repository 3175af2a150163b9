import logging

import numpy as np

from ndinterleave import IterationConfig, nditer_interleave_subarrays

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

# A batch of images paired with one shared mask; the mask is broadcast over
# the batch axis and each image is followed by the mask it is applied with.
rng = np.random.default_rng(0)
images = rng.random((3, 4, 4))
mask = (rng.random((4, 4)) > 0.5).astype(np.float64)

it = nditer_interleave_subarrays([images, mask], 2)
masked = []
while it.remaining:
    image = it.next().value
    weights = it.next().value
    masked.append(image * weights)
print("masked batch:", np.stack(masked).shape)

# Stop early and replay from the start.
grid = np.arange(2 * 3 * 2 * 2).reshape(2, 3, 2, 2)
it = nditer_interleave_subarrays([grid], 1, config=IterationConfig(order="column-major"))
print("first:", it.next().value.tolist())
print("stopped:", it.stop("early"))
print("replayed:", [v.tolist() for v in it][:3])
