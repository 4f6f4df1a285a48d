"""
Constants for the DXP container layout and the output classification table
"""

# Archive entry holding the list of embedded resources
MANIFEST_ENTRY = "EmbeddedResources.xml"

# Resource name under which the script catalog is registered in the manifest
SCRIPTS_RESOURCE_NAME = "EmbeddedScripts.xml"

# Manifest element names
RESOURCE_LIST_TAG = "EmbeddedResources"
RESOURCE_TAG = "EmbeddedResource"
RESOURCE_NAME_ATTR = "Name"
RESOURCE_PATH_ATTR = "ArchiveElementPath"

# Catalog element names
SCRIPT_LIST_TAG = "EmbeddedScripts"
SCRIPT_TAG = "EmbeddedScript"
DEFINITION_TAG = "ScriptDefinition"
CODE_TAG = "ScriptCode"
DEFINITION_ATTRS = ("Name", "LanguageName", "LanguageVersion", "WrapScript")

# LanguageName -> (subdirectory, extension)
DEFAULT_LANGUAGES = {
    "JavaScript": ("js", "js"),
    "IronPython": ("python", "py"),
}

# Used when a script declares an empty LanguageName
UNKNOWN_LANGUAGE = ("unknown", "txt")
