"""Site SEO package builder: internal link graph, schema markup and SEO validation."""
