import matplotlib

# Plots are only ever saved during tests
matplotlib.use('Agg')
