"""Input parsers that turn caption markup into CaptionRecord lists."""
