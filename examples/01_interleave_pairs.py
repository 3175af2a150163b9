import numpy as np

from ndinterleave import nditer_interleave_subarrays

x = np.arange(1, 9).reshape(2, 2, 2)
y = np.arange(9, 17).reshape(2, 2, 2)

# Rows of x and y, alternating: x[0,0], y[0,0], x[0,1], y[0,1], ...
it = nditer_interleave_subarrays([x, y], 1)
while True:
    result = it.next()
    if result.done:
        break
    print("row:", result.value.tolist())

# Matrices, using plain Python iteration.
for view in nditer_interleave_subarrays([x, y], 2):
    print("matrix:", view.tolist())
