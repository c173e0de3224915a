"""HTTP primitives: immutable Request, chainable Response, headers, query, cookies."""
