"""Device-aware document finalization for Flask applications.

Views build a component tree (``Document``) instead of writing markup; the
after_request finalizer renders that tree into markup suited to the device
resolved for the request. Wire everything with
``wng_flask.startup.wiring.init_app`` and attach documents with
``wng_flask.context.render_document``.
"""
