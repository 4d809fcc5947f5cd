"""Editor-support helpers: text positions, completion candidates and document symbols."""