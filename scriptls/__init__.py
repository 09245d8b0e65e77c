"""
scriptls – a language server for PowerShell-style scripts.

The package is organised into a few small modules:

* ``parser`` – a tokenizer that yields the syntax tree root and its
  1-based extent for a script document.
* ``formatting`` – the formatting engine boundary, the rule settings
  handed to engines and the engines themselves.
* ``lsp`` – the pygls server: document store, coordinate conversion and
  the document/range formatting request handlers.
* ``config`` – workspace and client supplied configuration.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
