import importlib

mod = "jschema"
class LazyLoader:
    """
    Lazy loader for the jschema functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and classes and their corresponding module paths
_mappings = {
    "SchemaValidator": (f"{mod}.validator", "SchemaValidator"),
    "read_schema": (f"{mod}.schemareader", "read_schema"),
    "read_schema_text": (f"{mod}.schemareader", "read_schema_text"),
    "load_schema": (f"{mod}.schemareader", "load_schema"),
    "validate_instance": (f"{mod}.validate", "validate_instance"),
    "validate_file": (f"{mod}.validate", "validate_file"),
    "deep_equals": (f"{mod}.equality", "deep_equals"),
    "structural_hash": (f"{mod}.equality", "structural_hash"),
    "DefinitionResolver": (f"{mod}.resolver", "DefinitionResolver"),
    "Diagnostic": (f"{mod}.diagnostics", "Diagnostic"),
    "ErrorKind": (f"{mod}.diagnostics", "ErrorKind"),
    "SchemaError": (f"{mod}.diagnostics", "SchemaError"),
    "format_message": (f"{mod}.rules", "format_message"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
