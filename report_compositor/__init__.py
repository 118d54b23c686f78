"""
report-compositor — Source package.

Modules:
    errors           — Export error taxonomy with user-facing messages
    geometry         — A4 page geometry (margins, header/footer bands, gap)
    measurer         — Bitmap -> Block (aspect-preserving scale-to-width in mm)
    packer           — Greedy sequential packing of Blocks into Pages
    writer           — ReportLab-backed Document Writer with revisitable pages
    renderer         — Cover, header, block and footer drawing passes
    rasterizer       — matplotlib Figure -> PNG bitmap capture
    surface          — Live section surface + scoped layout overrides
    naming           — Deterministic report filename contract
    assembler        — Export orchestrator / state machine
    sample_sections  — Synthetic SEO dashboard sections for the CLI demo
"""
