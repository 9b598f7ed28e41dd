r"""
Simulations of active particles with dry friction
-------------------------------------------------
This package can be used to perform Brownian dynamics simulations of an ensemble of
independent active particles in one dimension. Each particle is propelled by a persistent,
mean-reverting activity (an Ornstein-Uhlenbeck process with persistence time tau), kicked by
thermal noise, and slowed down by dry (Coulomb) friction, i.e. a force of constant magnitude
opposing the direction of motion. Because dry friction does not grow with speed, the competition
between friction and activity leads to non-Gaussian velocity distributions with a peak at rest.

The act_dry.bdsim module contains the integrator, the equilibration and measurement runs, and the
text output of trajectories, mean squared displacement and the stationary velocity distribution.
The act_dry.analysis module reads those files back in and computes and plots dynamical
observables such as the time averaged mean squared displacement and its power law exponent.

"""
__version__ = "0.1.0"
