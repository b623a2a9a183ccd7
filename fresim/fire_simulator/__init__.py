"""Time-stepped fire exposure simulation.

This package provides the simulation context and the components it drives
every tick: the clock, the structural elements and their exposure trackers,
and the fire sources.

Classes:
    - FireResistanceSim: Simulation context owning all state.
    - SimulationClock: Simulated time, time scale and run state.
    - StructuralElement: Rated structural member with exposure state.
    - ExposureTracker: Per-element exposure time and failure.
    - FireSource: Ignition point that exposes nearby elements.
    - IntegrityColorMap: Presentation colours for element states.

.. autoclass:: FireResistanceSim
    :members:

.. autoclass:: SimulationClock
    :members:

.. autoclass:: StructuralElement
    :members:
"""
