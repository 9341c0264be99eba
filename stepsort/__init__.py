"""
stepsort: Step-by-step sorting with pausable, cancellable, observable runs.

Run an algorithm and watch every step::

    from stepsort.controller import RunController

    controller = RunController()
    controller.add_listener(lambda event: print(event.active_indices, event.snapshot))
    result = controller.run("bubble", [5, 3, 8, 1])

Background runs with pause/resume/cancel::

    controller.start("quick", values, delay=0.03)
    controller.pause()
    controller.resume()
    controller.cancel()

Control surface for a presentation layer::

    from stepsort.dispatch import Dispatcher

Async event streaming::

    from stepsort.async_controller import AsyncRunController
"""

__version__ = "0.1.0"
