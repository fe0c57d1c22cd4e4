"""GUI-agnostic tree engine: models, navigation, key handling and the Tree itself."""
