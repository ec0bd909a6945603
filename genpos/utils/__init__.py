from genpos.utils.math import as_point_array, det_terms, nearly_equal, orientation_terms, tolerance_radius
