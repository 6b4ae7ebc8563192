"""Contains the name for the logger of StencilKit modules.

``stencilkit`` uses a simple logging system based on the
`Logging <https://docs.python.org/3/library/logging.html>`__ standard library.
Logging messages are grouped in different levels:

* ``INFO``: Formulas, Taylor series and search progress requested with
    ``verbose=True``.
* ``WARNING``: An indication that a request could not be honoured as given,
    e.g. a stencil had to be shrunk or a supplied formula was wrong.

By default, only messages of level ``WARNING`` are displayed.

Calling applications can configure the format and log level of the displayed messages
by `Configuring Logging <https://docs.python.org/3/howto/logging.html#configuring-logging>`__
for ``stencilkit.logger.stencilkit_logger``, e.g.::

    >>> import logging
    >>> logging.basicConfig(
    ...     level=logging.INFO,
    ...     format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    ... )
"""
import logging

logger_name = "stencilkit"
stencilkit_logger = logging.getLogger(logger_name)
