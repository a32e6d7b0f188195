# every tunable of the family network analysis lives here. change a value here, not in the modules.

MOTHER = 'mother'
FATHER = 'father'
SPOUSE = 'spouse'

RELATION_KINDS = {MOTHER, FATHER, SPOUSE}

PARENT_KINDS = {MOTHER, FATHER}

# kinds that become a plain undirected tie when we collapse the graph.
# parent -> child is directed in the table but for the family network
# a mother is as close to her kid as the kid is to her, so we keep them all.
# spouse is symmetric anyway

SYMMETRIC_KINDS = {MOTHER, FATHER, SPOUSE}

# gender flag in the node table (source data uses 1 for male, 0 for female)
GENDER_LABELS = {1: 'male', 0: 'female'}

# table layouts

NODE_COLUMNS = ['name', 'gender', 'culture', 'house', 'popularity',
                'house_group', 'color', 'shape']

EDGE_COLUMNS = ['source', 'target', 'kind', 'color', 'line_style']

REQUIRED_NODE_COLUMNS = {'name'}
REQUIRED_EDGE_COLUMNS = {'source', 'target', 'kind'}

# solver knobs

DEFAULT_DAMPING = 0.85
DEFAULT_TOL = 1e-6
DEFAULT_MAX_ITER = 500

DEFAULT_TOP_N = 5
