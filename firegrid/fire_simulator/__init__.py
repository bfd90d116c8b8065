"""Fire propagation simulation controller.

Classes:
    - FireSim: Runs the idle / running / paused state machine over a grid.

.. autoclass:: FireSim
    :members:
"""
