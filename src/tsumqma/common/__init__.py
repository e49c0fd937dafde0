"""Static catalogs shared across the engine: stages, characters, equipment, quotes.

Import the submodules directly (``tsumqma.common.equipment`` etc.); this
package stays import-free because core models depend on ``common.stages``.
"""
