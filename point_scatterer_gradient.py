import numpy as np
import matplotlib.pyplot as plt
import scipy.sparse.linalg as spla

from FDFWI import ModelConfig, MisfitEvaluator, simulate
from FDFWI.utils import gradient_check, symmetry_check
from FDFWI.utils.plot import plot_model, plot_acquisition

# ------------------------------------------------------------
# 1) Grid, acquisition & models
# ------------------------------------------------------------
n1 = n2 = 51
h = 10.0
freq = 5.0  # Hz

cfg = ModelConfig(
    h=(h, h), n=(n1, n2), f=freq,
    zs=[20.0] * 5, xs=np.linspace(50.0, 450.0, 5),      # sources near the top
    zr=[480.0] * 26, xr=np.linspace(0.0, 500.0, 26),    # receivers near the bottom
)
grid = cfg.grid

c0 = 2.0  # km/s
m0 = np.full(cfg.N, 1.0 / c0 ** 2)  # squared slowness [s^2/km^2]

Z, X = grid.meshgrid()
img = grid.image(m0).copy()
img[(Z - 250.0) ** 2 + (X - 250.0) ** 2 < 60.0 ** 2] = 1.0 / 2.2 ** 2  # faster disc
m_true = grid.vector(img)

# ------------------------------------------------------------
# 2) Observed data from the true model
# ------------------------------------------------------------
D = simulate(m_true, cfg)
print(f"data matrix: {D.shape[0]} receivers x {D.shape[1]} sources")

# ------------------------------------------------------------
# 3) Misfit, gradient & GN Hessian at the background model
# ------------------------------------------------------------
alpha = 1e-3
ev = MisfitEvaluator(cfg, verbose=True)
f0, g0, H = ev.evaluate(m0, D, alpha, hessian=True)

# ------------------------------------------------------------
# 4) Consistency checks
# ------------------------------------------------------------
rng = np.random.default_rng(0)
checks = gradient_check(lambda m: ev.evaluate(m, D, alpha, gradient=False).value,
                        lambda m: ev.evaluate(m, D, alpha).gradient,
                        m0, rng.standard_normal(cfg.N), steps=(1e-2, 1e-3, 1e-4))
for c in checks:
    print(f"step={c.step:7.1e}  fd={c.finite_difference: .6e}  <g,d>={c.analytic: .6e}  err={c.error:.2e}")

x1, x2 = rng.standard_normal((2, cfg.N))
print(f"Hessian asymmetry: {symmetry_check(H.apply, x1, x2):.2e}")

# ------------------------------------------------------------
# 5) One Gauss-Newton direction (CG on H dm = -g)
# ------------------------------------------------------------
dm, info = spla.cg(H, -g0, rtol=1e-3, maxiter=20)
print(f"CG info={info}, Hessian applications={H.n_applied}")

# ------------------------------------------------------------
# 6) Plot
# ------------------------------------------------------------
fig, axes = plt.subplots(1, 3, figsize=(14, 4))
plot_model(grid, m_true, ax=axes[0], title="true model", label="s²/km²")
plot_acquisition(grid, cfg.acquisition, axes[0])
plot_model(grid, g0, ax=axes[1], title="gradient", centered=True)
plot_model(grid, dm, ax=axes[2], title="GN update", centered=True)
plt.tight_layout()
plt.show()
