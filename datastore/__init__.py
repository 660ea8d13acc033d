"""In-memory reading tree and its failure conditions."""
