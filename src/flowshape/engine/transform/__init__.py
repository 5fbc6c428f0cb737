"""Converters that build the canonical tree (JSON and tabular input to XML)
and the XML to JSON reconstructor."""
