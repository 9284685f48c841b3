import numpy as np


def four_over_one_plus_square(x):
    #Integrates to pi over [0, 1]
    return 4.0 / (1.0 + np.multiply(x, x))
