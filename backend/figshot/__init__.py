"""Figma screenshot package.

Modules:
- config / settings: service credentials and runtime tunables
- urls: Figma file URL resolution
- locator: node search over the Figma document tree
- integrations: Figma REST client and Cloudinary uploader
- pipeline: resolve → fetch → search → render → publish
"""
