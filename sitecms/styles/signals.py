"""
Style change signals.

The refresh and applied signals are sent with the browsing context as
sender and carry no payload. Receivers connect with ``sender=context`` so a
refresh in one context never reaches another.
"""
from blinker import Namespace

_signals = Namespace()

#: Ask every style channel of a context to refetch its stylesheet.
refresh_requested = _signals.signal('refresh-request')

#: A channel replaced its stylesheet; buttons should recompute their style.
style_applied = _signals.signal('style-applied')

#: The active theme or button preset was saved. Sent by the style service
#: after commit with ``'theme'`` or ``'button-preset'`` as sender; every open
#: browsing context answers with its own refresh request.
active_style_saved = _signals.signal('active-style-saved')
