"""Cell parsing, evaluation and display merging."""
