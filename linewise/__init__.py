"""linewise - streaming text-file search and edit primitives for automated callers.

The public entry point is the service layer:
    from linewise.services.text_file_svc import TextFileService

Individual operations live in their workflow modules:
    from linewise.workflows.text.show_text_wf import show_text_workflow

Note: Operations are not re-exported here so importing the package stays
cheap and module names never shadow function names.
"""

from linewise.__version__ import __version__

__all__ = ["__version__"]
