"""
Decode the Flexible and Interoperable data Transfer (FIT) protocol [1]_.

This subpackage started life as a leaner, and somewhat meaner, py3k version
of the python-fitparse package [2]_. The protocol itself is described
extensively in the FIT SDK materials [1]_.

The reading internals---i.e. the protocol implementation---are in the
`_protocol` module, which yields raw messages. The `_reading` module maps
those onto an `Exercise`, doing the unit conversions itself with the help of
the few profile tables kept in `_profile`.


.. [1] https://www.thisisant.com/resources/fit
.. [2] https://github.com/dtcooper/python-fitparse/tree/ng

"""
from exerciseviewer.fit._reading import read_and_format as read
from exerciseviewer.fit._reading import decode, gen_records
from exerciseviewer.fit._protocol import gen_fit_messages
